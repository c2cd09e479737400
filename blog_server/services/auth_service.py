"""
认证服务

- 注册: 创建用户并分配默认角色
- 登录: 校验密码, 签发 Access Token (携带已启用角色ID) 和 Refresh Token
- 刷新: Refresh Token 必须仍保存在 Redis 中, 重新查询角色后签发新的 Access Token
- 登出: 从 Redis 删除 Refresh Token
"""

from datetime import datetime, timezone
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from blog_server.core.config import settings
from blog_server.core.exceptions import ConflictError, ForbiddenError, UnauthorizedError
from blog_server.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)
from blog_server.models.user import User
from blog_server.repositories.role_repository import RoleRepository
from blog_server.repositories.user_repository import UserRepository
from blog_server.schemas.auth import Token, TokenRefreshResponse, UserLogin, UserRegister
from blog_server.utils.token import TokenService


class AuthService:
    def __init__(
        self,
        session: AsyncSession,
        token_service: TokenService,
        repo: Optional[UserRepository] = None,
        role_repo: Optional[RoleRepository] = None,
    ) -> None:
        self.session = session
        self.token_service = token_service
        self.repo = repo or UserRepository(session)
        self.role_repo = role_repo or RoleRepository(session)

    @staticmethod
    def _expires_in() -> int:
        return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    async def register(self, data: UserRegister) -> User:
        if await self.repo.exists_by_field("username", data.username):
            raise ConflictError("用户名已存在")
        if await self.repo.exists_by_field("email", data.email):
            raise ConflictError("邮箱已被注册")

        user = await self.repo.create(
            username=data.username,
            email=data.email,
            nickname=data.nickname,
            hashed_password=get_password_hash(data.password),
        )
        default_roles = await self.role_repo.get_default_roles()
        if default_roles:
            await self.repo.replace_roles(user.id, [role.id for role in default_roles])
        await self.session.commit()

        logger.info(
            f"用户注册成功: {user.username} (ID: {user.id}), "
            f"默认角色={[role.role_key for role in default_roles]}"
        )
        return user

    async def login(self, data: UserLogin) -> Token:
        user = await self.repo.get_by_username_or_email(data.username)
        if user is None or not verify_password(data.password, user.hashed_password):
            logger.warning(f"登录失败: 用户名或密码错误 - {data.username}")
            raise UnauthorizedError("用户名或密码错误")
        if not user.is_active:
            logger.warning(f"登录失败: 用户已被禁用 - {user.username}")
            raise ForbiddenError("用户已被禁用")

        role_ids = await self.repo.get_enabled_role_ids(user.id)
        access_token = create_access_token(user.id, user.username, role_ids)
        refresh_token = create_refresh_token(user.id, user.username)
        await self.token_service.store_refresh_token(refresh_token, user.id, user.username)

        await self.repo.update(user, last_login_at=datetime.now(timezone.utc))
        await self.session.commit()

        logger.info(f"用户登录成功: {user.username} (ID: {user.id}), role_ids={role_ids}")
        return Token(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._expires_in(),
        )

    async def refresh(self, refresh_token: str) -> TokenRefreshResponse:
        payload = decode_refresh_token(refresh_token)
        if payload is None:
            raise UnauthorizedError("无效的 Refresh Token")

        if await self.token_service.get_refresh_token(refresh_token) is None:
            raise UnauthorizedError("Refresh Token 已失效, 请重新登录")

        user = await self.repo.get(payload.get("user_id"))
        if user is None:
            raise UnauthorizedError("用户不存在")
        if not user.is_active:
            raise ForbiddenError("用户已被禁用")

        # 角色可能已变化, 重新查询
        role_ids = await self.repo.get_enabled_role_ids(user.id)
        access_token = create_access_token(user.id, user.username, role_ids)
        logger.debug(f"Access Token 已刷新: {user.username} (ID: {user.id})")
        return TokenRefreshResponse(access_token=access_token, expires_in=self._expires_in())

    async def logout(self, refresh_token: str) -> bool:
        """
        登出, 撤销提交的 Refresh Token

        Returns:
            bool: Token 是否存在并被撤销
        """
        revoked = await self.token_service.revoke_refresh_token(refresh_token)
        if not revoked:
            logger.debug("登出时 Refresh Token 不存在或已失效")
        return revoked
