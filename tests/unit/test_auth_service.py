"""Unit tests for AuthService."""

from unittest.mock import AsyncMock

import pytest

from blog_server.core.exceptions import ConflictError, ForbiddenError, UnauthorizedError
from blog_server.core.security import (
    create_refresh_token,
    decode_access_token,
    get_password_hash,
)
from blog_server.models.user import User
from blog_server.schemas.auth import UserLogin, UserRegister
from blog_server.services.auth_service import AuthService
from tests.factories import apply_update, make_role


def make_user(id=10, password="secret123", **kwargs):
    values = dict(
        id=id,
        username="alice",
        email="alice@example.com",
        hashed_password=get_password_hash(password),
        is_active=True,
    )
    values.update(kwargs)
    return User(**values)


def make_service():
    mock_repo = AsyncMock()
    mock_repo.update.side_effect = apply_update
    mock_role_repo = AsyncMock()
    mock_token_service = AsyncMock()
    session = AsyncMock()
    service = AuthService(
        session,
        mock_token_service,
        repo=mock_repo,
        role_repo=mock_role_repo,
    )
    return service, mock_repo, mock_role_repo, mock_token_service


class TestRegister:
    @pytest.mark.asyncio
    async def test_assigns_default_roles(self):
        service, mock_repo, mock_role_repo, _ = make_service()
        mock_repo.exists_by_field.return_value = False
        mock_repo.create.side_effect = lambda **kw: User(id=11, **kw)
        mock_role_repo.get_default_roles.return_value = [make_role(4, is_default=True)]

        user = await service.register(
            UserRegister(username="bob", email="bob@example.com", password="secret123")
        )

        assert user.username == "bob"
        assert user.hashed_password != "secret123"
        mock_repo.replace_roles.assert_awaited_once_with(11, [4])

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self):
        service, mock_repo, _, _ = make_service()
        mock_repo.exists_by_field.return_value = True

        with pytest.raises(ConflictError):
            await service.register(
                UserRegister(username="bob", email="bob@example.com", password="secret123")
            )

        mock_repo.create.assert_not_awaited()


class TestLogin:
    @pytest.mark.asyncio
    async def test_access_token_carries_enabled_role_ids(self):
        service, mock_repo, _, mock_token_service = make_service()
        user = make_user()
        mock_repo.get_by_username_or_email.return_value = user
        mock_repo.get_enabled_role_ids.return_value = [3, 2]

        token = await service.login(UserLogin(username="alice", password="secret123"))

        payload = decode_access_token(token.access_token)
        assert payload["user_id"] == 10
        assert payload["role_ids"] == [2, 3]
        mock_token_service.store_refresh_token.assert_awaited_once_with(
            token.refresh_token, 10, "alice"
        )
        assert user.last_login_at is not None

    @pytest.mark.asyncio
    async def test_wrong_password_is_unauthorized(self):
        service, mock_repo, _, mock_token_service = make_service()
        mock_repo.get_by_username_or_email.return_value = make_user()

        with pytest.raises(UnauthorizedError):
            await service.login(UserLogin(username="alice", password="wrong-password"))

        mock_token_service.store_refresh_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_user_is_forbidden(self):
        service, mock_repo, _, _ = make_service()
        mock_repo.get_by_username_or_email.return_value = make_user(is_active=False)

        with pytest.raises(ForbiddenError):
            await service.login(UserLogin(username="alice", password="secret123"))


class TestRefresh:
    @pytest.mark.asyncio
    async def test_revoked_token_is_rejected(self):
        service, _, _, mock_token_service = make_service()
        mock_token_service.get_refresh_token.return_value = None

        with pytest.raises(UnauthorizedError):
            await service.refresh(create_refresh_token(10, "alice"))

    @pytest.mark.asyncio
    async def test_reissues_with_current_roles(self):
        service, mock_repo, _, mock_token_service = make_service()
        mock_token_service.get_refresh_token.return_value = {"user_id": 10}
        mock_repo.get.return_value = make_user()
        mock_repo.get_enabled_role_ids.return_value = [4]

        result = await service.refresh(create_refresh_token(10, "alice"))

        assert decode_access_token(result.access_token)["role_ids"] == [4]

    @pytest.mark.asyncio
    async def test_garbage_token_is_rejected(self):
        service, _, _, mock_token_service = make_service()

        with pytest.raises(UnauthorizedError):
            await service.refresh("not-a-token")

        mock_token_service.get_refresh_token.assert_not_awaited()
