# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from user_service.application.users.usecase import UserUsecase
from user_service.domain.repositories import UserRepository
from user_service.infra.db import get_db
from user_service.infra.user_repository import SqlAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return SqlAlchemyUserRepository(db)


def get_user_usecase(repo: UserRepository = Depends(get_user_repository)) -> UserUsecase:
    return UserUsecase(repo)
