"""
用户路由

- router: 当前用户的个人接口 (/api/v1/users/me)
- admin_router: 用户管理接口 (/admin/api/v1/users)
"""

from typing import List

from fastapi import APIRouter, Depends, status

from blog_server.dependencies.auth import get_current_user, get_userinfo
from blog_server.dependencies.services import get_token_service, get_user_service
from blog_server.models.user import User
from blog_server.schemas.auth import CurrentUserInfo
from blog_server.schemas.base import MessageResponse, PageParams, PageResult, StatusUpdate
from blog_server.schemas.permission import PermissionTreeNode
from blog_server.schemas.user import (
    PasswordChange,
    PasswordReset,
    UserQuery,
    UserResponse,
    UserRoleAssign,
    UserUpdate,
)
from blog_server.services.user_service import UserService
from blog_server.utils.token import TokenService

router = APIRouter(prefix="/users", tags=["用户"])
admin_router = APIRouter(prefix="/users", tags=["用户管理"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """获取当前用户信息"""
    return current_user


@router.get("/me/menus", response_model=List[PermissionTreeNode])
async def get_my_menus(
    userinfo: CurrentUserInfo = Depends(get_userinfo),
    user_service: UserService = Depends(get_user_service),
):
    """获取当前用户的菜单树"""
    return await user_service.get_user_menus(userinfo.user_id, userinfo.role_ids)


@router.put("/me/password", response_model=MessageResponse)
async def change_my_password(
    password_data: PasswordChange,
    userinfo: CurrentUserInfo = Depends(get_userinfo),
    user_service: UserService = Depends(get_user_service),
    token_service: TokenService = Depends(get_token_service),
):
    """修改密码, 成功后撤销所有 Refresh Token, 需要重新登录"""
    await user_service.change_password(
        userinfo.user_id, password_data.old_password, password_data.new_password
    )
    await token_service.revoke_all_user_tokens(userinfo.user_id)
    return MessageResponse(message="密码已修改, 请重新登录")


@admin_router.get("", response_model=PageResult[UserResponse])
async def list_users(
    query: UserQuery = Depends(),
    params: PageParams = Depends(),
    user_service: UserService = Depends(get_user_service),
):
    """
    获取用户列表

    - **username** / **email**: 模糊匹配
    - **is_active**: 状态筛选
    - **role_id**: 按角色筛选
    """
    return await user_service.list_users(query, params)


@admin_router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
):
    return await user_service.get_user(user_id)


@admin_router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    user_service: UserService = Depends(get_user_service),
):
    """更新用户信息, 只更新提交的字段"""
    return await user_service.update_user(user_id, user_data)


@admin_router.put("/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: int,
    status_data: StatusUpdate,
    userinfo: CurrentUserInfo = Depends(get_userinfo),
    user_service: UserService = Depends(get_user_service),
    token_service: TokenService = Depends(get_token_service),
):
    """启用/禁用用户, 禁用时撤销该用户的 Refresh Token"""
    user = await user_service.update_user_status(
        user_id, status_data.enabled, operator_id=userinfo.user_id
    )
    if not status_data.enabled:
        await token_service.revoke_all_user_tokens(user_id)
    return user


@admin_router.put("/{user_id}/roles", response_model=UserResponse)
async def assign_user_roles(
    user_id: int,
    role_data: UserRoleAssign,
    user_service: UserService = Depends(get_user_service),
):
    """整体替换用户的角色, 新角色在用户下次获取 Access Token 时生效"""
    return await user_service.assign_roles(user_id, role_data.role_ids)


@admin_router.put("/{user_id}/password", response_model=MessageResponse)
async def reset_user_password(
    user_id: int,
    password_data: PasswordReset,
    user_service: UserService = Depends(get_user_service),
    token_service: TokenService = Depends(get_token_service),
):
    """管理员重置用户密码"""
    await user_service.reset_password(user_id, password_data.new_password)
    await token_service.revoke_all_user_tokens(user_id)
    return MessageResponse(message="密码已重置")


@admin_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    userinfo: CurrentUserInfo = Depends(get_userinfo),
    user_service: UserService = Depends(get_user_service),
):
    """删除用户, 不能删除当前登录的用户"""
    await user_service.delete_user(user_id, operator_id=userinfo.user_id)
    return None
