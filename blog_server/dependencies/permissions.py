"""
权限检查相关的依赖注入

require_api_permission 挂载在所有管理端路由上, 在处理函数执行前按请求方法和路径做 RBAC 检查:
- 未认证: 401
- 检查完成但没有匹配的接口权限: 403
- 权限数据查询失败: 500 (由 RBACService 抛出 InfrastructureError)
"""

from fastapi import Depends, Request
from loguru import logger

from blog_server.core.exceptions import ForbiddenError
from blog_server.dependencies.auth import get_userinfo
from blog_server.dependencies.services import get_rbac_service
from blog_server.schemas.auth import CurrentUserInfo
from blog_server.services.rbac_service import RBACService


async def require_api_permission(
    request: Request,
    userinfo: CurrentUserInfo = Depends(get_userinfo),
    rbac_service: RBACService = Depends(get_rbac_service),
) -> CurrentUserInfo:
    """
    接口权限检查

    Returns:
        CurrentUserInfo: 通过检查的用户信息

    Raises:
        ForbiddenError: 没有访问该接口的权限
    """
    allowed = await rbac_service.check_permission(
        userinfo.user_id,
        userinfo.role_ids,
        request.url.path,
        request.method,
    )
    if not allowed:
        logger.warning(
            f"权限不足: user_id={userinfo.user_id}, username={userinfo.username}, "
            f"{request.method} {request.url.path}"
        )
        raise ForbiddenError("没有访问该接口的权限")
    return userinfo
