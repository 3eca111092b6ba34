# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from user_service.domain.models import User


class UserRepository(ABC):
    """用户仓储接口，具体实现见 infra.user_repository"""

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def find_all(self, page: int, limit: int) -> Tuple[List[User], int]:
        """返回 (当前页数据, 总数)"""
        raise NotImplementedError

    @abstractmethod
    def save(self, user: User) -> User:
        raise NotImplementedError

    @abstractmethod
    def delete(self, user_id: str) -> None:
        raise NotImplementedError
