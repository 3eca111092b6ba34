# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from user_service.domain.models import User
from user_service.domain.repositories import UserRepository


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._db.get(User, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.strip().lower())
        return self._db.scalars(stmt).first()

    def find_all(self, page: int, limit: int) -> Tuple[List[User], int]:
        offset = (page - 1) * limit
        stmt = (
            select(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(offset)
            .limit(limit)
        )
        items = list(self._db.scalars(stmt).all())
        total = self._db.scalar(select(func.count()).select_from(User)) or 0
        return items, int(total)

    def save(self, user: User) -> User:
        """存在则更新，不存在则插入"""
        merged = self._db.merge(user)
        try:
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        self._db.refresh(merged)
        return merged

    def delete(self, user_id: str) -> None:
        self._db.execute(delete(User).where(User.id == user_id))
        self._db.commit()
