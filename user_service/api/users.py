# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from user_service.api.deps import get_user_usecase
from user_service.application.users.usecase import UserUsecase
from user_service.domain import schemas


router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=schemas.UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
    responses={400: {"description": "Invalid input data"}, 409: {"description": "User already exists"}},
)
def create_user(
    req: schemas.CreateUserRequest,
    uc: UserUsecase = Depends(get_user_usecase),
):
    user = uc.create_user(req)
    return schemas.UserResponse.model_validate(user)


@router.get(
    "",
    response_model=schemas.PaginatedResponse[schemas.UserResponse],
    summary="List all users with pagination",
)
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    uc: UserUsecase = Depends(get_user_usecase),
):
    items, total = uc.list_users(page=page, limit=limit)
    users = [schemas.UserResponse.model_validate(u) for u in items]
    return schemas.PaginatedResponse[schemas.UserResponse].of(users, total, page, limit)


@router.get(
    "/{user_id}",
    response_model=schemas.UserResponse,
    summary="Get user by ID",
    responses={404: {"description": "User not found"}},
)
def get_user(
    user_id: str,
    uc: UserUsecase = Depends(get_user_usecase),
):
    return schemas.UserResponse.model_validate(uc.get_user(user_id))
