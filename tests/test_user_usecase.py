# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from user_service.application.users.usecase import UserUsecase
from user_service.common.errors import ConflictError, NotFoundError
from user_service.domain import models, schemas
from user_service.domain.repositories import UserRepository


@pytest.fixture
def repo() -> MagicMock:
    return MagicMock(spec=UserRepository)


@pytest.fixture
def uc(repo: MagicMock) -> UserUsecase:
    return UserUsecase(repo)


class TestCreateUser:
    def test_creates_new_user(self, uc: UserUsecase, repo: MagicMock) -> None:
        req = schemas.CreateUserRequest(name="John Doe", email="john@example.com")
        repo.find_by_email.return_value = None
        repo.save.side_effect = lambda user: user

        user = uc.create_user(req)

        assert user.name == "John Doe"
        assert user.email == "john@example.com"
        assert user.is_active is True
        assert user.id
        repo.find_by_email.assert_called_once_with("john@example.com")
        repo.save.assert_called_once()

    def test_conflict_when_email_taken(self, uc: UserUsecase, repo: MagicMock) -> None:
        req = schemas.CreateUserRequest(name="John Doe", email="john@example.com")
        repo.find_by_email.return_value = models.User.create("John Doe", "john@example.com")

        with pytest.raises(ConflictError):
            uc.create_user(req)

        repo.find_by_email.assert_called_once_with("john@example.com")
        repo.save.assert_not_called()

    def test_logs_creation(self, uc: UserUsecase, repo: MagicMock, log_sink) -> None:
        repo.find_by_email.return_value = None
        repo.save.side_effect = lambda user: user

        uc.create_user(schemas.CreateUserRequest(name="A", email="a@example.com"))

        messages = [r["message"] for r in log_sink.records() if r.get("context") == "UserUsecase"]
        assert messages[0] == "Creating user with email: a@example.com"
        assert messages[-1].startswith("User created successfully with id: ")


class TestGetUser:
    def test_returns_user(self, uc: UserUsecase, repo: MagicMock) -> None:
        user = models.User.create("John Doe", "john@example.com")
        repo.find_by_id.return_value = user
        assert uc.get_user(user.id) is user

    def test_not_found(self, uc: UserUsecase, repo: MagicMock) -> None:
        repo.find_by_id.return_value = None
        with pytest.raises(NotFoundError) as ei:
            uc.get_user("missing")
        assert ei.value.message == "User not found"
        assert ei.value.status_code == 404


class TestListUsers:
    def test_delegates_to_repository(self, uc: UserUsecase, repo: MagicMock) -> None:
        repo.find_all.return_value = ([], 0)
        assert uc.list_users(page=3, limit=5) == ([], 0)
        repo.find_all.assert_called_once_with(3, 5)
