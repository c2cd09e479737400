"""
安全工具模块
- JWT Token 生成和验证
- 密码加密和验证
"""

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from jose import JWTError, jwt
from loguru import logger
from passlib.context import CryptContext

from blog_server.core.config import settings

# 密码加密上下文
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """加密密码"""
    return pwd_context.hash(password)


def _refresh_secret_key() -> str:
    return settings.REFRESH_TOKEN_SECRET_KEY or settings.SECRET_KEY


def create_access_token(
    user_id: int,
    username: str,
    role_ids: Iterable[int],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    创建 JWT Access Token

    Token 中携带用户已启用角色的ID列表, 供 RBAC 权限检查直接使用,
    无需每次请求查询用户角色

    Args:
        user_id: 用户ID
        username: 用户名
        role_ids: 已启用角色ID列表
        expires_delta: 过期时间增量, 为 None 时使用配置值

    Returns:
        str: JWT Token 字符串
    """
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "sub": username,
        "user_id": user_id,
        "role_ids": sorted(set(role_ids)),
        "type": "access",
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """
    解码 JWT Access Token

    Returns:
        dict: 解码后的数据，如果 Token 无效、过期或类型不符则返回 None
    """
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.debug(f"Token 解码失败: {e}")
        return None

    if payload.get("type") != "access":
        return None
    return payload


def create_refresh_token(
    user_id: int, username: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    创建 JWT Refresh Token

    Refresh Token 不携带角色信息, 刷新时重新查询用户当前的角色
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))
    to_encode = {
        "sub": username,
        "user_id": user_id,
        "type": "refresh",
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(to_encode, _refresh_secret_key(), algorithm=settings.ALGORITHM)


def decode_refresh_token(token: str) -> Optional[dict]:
    """
    解码 JWT Refresh Token

    Returns:
        dict: 解码后的数据，如果 Token 无效则返回 None
    """
    try:
        payload = jwt.decode(
            token, _refresh_secret_key(), algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.debug(f"Refresh Token 解码失败: {e}")
        return None

    if payload.get("type") != "refresh":
        return None
    return payload


def hash_token(token: str) -> str:
    """对 Token 进行 SHA256 哈希处理(用于存储)"""
    return hashlib.sha256(token.encode()).hexdigest()
