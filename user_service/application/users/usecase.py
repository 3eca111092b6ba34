# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import List, Tuple

from user_service.common.errors import BadRequestError, ConflictError, NotFoundError
from user_service.common.logging import get_logger
from user_service.domain import models, schemas
from user_service.domain.repositories import UserRepository

logger = get_logger("UserUsecase")


class UserUsecase:
    """用户域：创建 / 查询 / 分页列表"""

    def __init__(self, repo: UserRepository) -> None:
        self._repo = repo

    def create_user(self, req: schemas.CreateUserRequest) -> models.User:
        logger.info(f"Creating user with email: {req.email}")

        existed = self._repo.find_by_email(req.email)
        if existed is not None:
            logger.warn(f"User with email {req.email} already exists")
            raise ConflictError("User with this email already exists")

        try:
            user = models.User.create(req.name, req.email)
        except ValueError as e:
            raise BadRequestError(str(e)) from e

        saved = self._repo.save(user)
        logger.info(f"User created successfully with id: {saved.id}")
        return saved

    def get_user(self, user_id: str) -> models.User:
        logger.info(f"Getting user with id: {user_id}")

        user = self._repo.find_by_id(user_id)
        if user is None:
            logger.warn(f"User with id {user_id} not found")
            raise NotFoundError("User not found")
        return user

    def list_users(self, page: int = 1, limit: int = 10) -> Tuple[List[models.User], int]:
        logger.info(f"Listing users - page: {page}, limit: {limit}")

        items, total = self._repo.find_all(page, limit)

        logger.info(f"Found {total} users")
        return items, total
