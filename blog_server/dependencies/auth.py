"""
认证相关的依赖注入

全局认证中间件已完成 Token 校验, 并把 Token 中的用户信息写入 request.state.userinfo:
    {"user_id": int, "username": str, "role_ids": List[int]}
"""

from fastapi import Depends, Request
from fastapi.security import HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from blog_server.core.db import get_db
from blog_server.core.exceptions import ForbiddenError, UnauthorizedError
from blog_server.models.user import User
from blog_server.repositories.user_repository import UserRepository
from blog_server.schemas.auth import CurrentUserInfo

# 仅用于在 API 文档中声明 Bearer 认证, 实际解析由全局认证中间件完成
http_bearer = HTTPBearer(auto_error=False)


async def get_userinfo(request: Request) -> CurrentUserInfo:
    """
    从 request.state 获取当前用户信息, 不查询数据库

    Raises:
        UnauthorizedError: 请求未经过认证
    """
    userinfo = getattr(request.state, "userinfo", None)
    if not userinfo:
        raise UnauthorizedError("未认证, 请先登录")
    return CurrentUserInfo(**userinfo)


async def get_current_user(
    userinfo: CurrentUserInfo = Depends(get_userinfo),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    获取当前登录用户的完整信息

    Raises:
        UnauthorizedError: 用户已不存在
        ForbiddenError: 用户已被禁用
    """
    user = await UserRepository(db).get_with_roles(userinfo.user_id)
    if user is None:
        raise UnauthorizedError("用户不存在")
    if not user.is_active:
        raise ForbiddenError("用户已被禁用")
    return user
