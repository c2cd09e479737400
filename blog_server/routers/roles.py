"""
角色管理路由 (/admin/api/v1/roles)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from blog_server.dependencies.services import get_role_service
from blog_server.schemas.base import OptionItem, PageParams, PageResult, StatusUpdate
from blog_server.schemas.role import (
    RoleCreate,
    RoleListResponse,
    RolePermissionAssign,
    RoleResponse,
    RoleUpdate,
)
from blog_server.services.role_service import RoleService

admin_router = APIRouter(prefix="/roles", tags=["角色管理"])


@admin_router.get("", response_model=PageResult[RoleListResponse])
async def list_roles(
    role_name: Optional[str] = Query(None, description="角色名称, 模糊匹配"),
    is_enabled: Optional[bool] = Query(None, description="是否启用"),
    is_builtin: Optional[bool] = Query(None, description="是否内置"),
    params: PageParams = Depends(),
    role_service: RoleService = Depends(get_role_service),
):
    """获取角色列表"""
    filters = {"role_name": role_name, "is_enabled": is_enabled, "is_builtin": is_builtin}
    return await role_service.list_roles(filters, params)


@admin_router.get("/options", response_model=List[OptionItem])
async def get_role_options(role_service: RoleService = Depends(get_role_service)):
    """已启用角色的下拉选项"""
    return await role_service.get_role_options()


@admin_router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: int,
    role_service: RoleService = Depends(get_role_service),
):
    """获取角色详情, 包含权限列表"""
    return await role_service.get_role(role_id)


@admin_router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    role_data: RoleCreate,
    role_service: RoleService = Depends(get_role_service),
):
    """
    创建角色

    - **role_name** / **role_key**: 唯一
    - **is_default**: 是否为新注册用户的默认角色
    - **permission_ids**: 权限ID列表(可选)
    """
    return await role_service.create_role(role_data)


@admin_router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: int,
    role_data: RoleUpdate,
    role_service: RoleService = Depends(get_role_service),
):
    """更新角色, 只更新提交的字段"""
    return await role_service.update_role(role_id, role_data)


@admin_router.put("/{role_id}/status", response_model=RoleResponse)
async def update_role_status(
    role_id: int,
    status_data: StatusUpdate,
    role_service: RoleService = Depends(get_role_service),
):
    """启用/禁用角色, 内置超级管理员角色不能禁用"""
    return await role_service.update_role_status(role_id, status_data.enabled)


@admin_router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: int,
    role_service: RoleService = Depends(get_role_service),
):
    """删除角色, 内置角色和已分配给用户的角色不能删除"""
    await role_service.delete_role(role_id)
    return None


@admin_router.get("/{role_id}/permissions", response_model=List[int])
async def get_role_permissions(
    role_id: int,
    role_service: RoleService = Depends(get_role_service),
):
    """获取角色已分配的权限ID列表"""
    return await role_service.get_role_permission_ids(role_id)


@admin_router.put("/{role_id}/permissions", response_model=RoleResponse)
async def assign_role_permissions(
    role_id: int,
    assign_data: RolePermissionAssign,
    role_service: RoleService = Depends(get_role_service),
):
    """整体替换角色的权限"""
    return await role_service.assign_permissions(role_id, assign_data.permission_ids)


@admin_router.post("/{role_id}/permissions/{permission_id}", response_model=RoleResponse)
async def add_role_permission(
    role_id: int,
    permission_id: int,
    role_service: RoleService = Depends(get_role_service),
):
    """为角色添加一个权限"""
    return await role_service.add_permission(role_id, permission_id)


@admin_router.delete("/{role_id}/permissions/{permission_id}", response_model=RoleResponse)
async def remove_role_permission(
    role_id: int,
    permission_id: int,
    role_service: RoleService = Depends(get_role_service),
):
    """从角色移除一个权限"""
    return await role_service.remove_permission(role_id, permission_id)
