"""
权限管理路由 (/admin/api/v1/permissions)
"""

from typing import List

from fastapi import APIRouter, Depends, status

from blog_server.dependencies.services import get_permission_service
from blog_server.schemas.base import OptionItem, PageParams, PageResult, StatusUpdate
from blog_server.schemas.permission import (
    PermissionCreate,
    PermissionQuery,
    PermissionResponse,
    PermissionTreeNode,
    PermissionUpdate,
)
from blog_server.services.permission_service import PermissionService

admin_router = APIRouter(prefix="/permissions", tags=["权限管理"])


@admin_router.get("", response_model=PageResult[PermissionResponse])
async def list_permissions(
    query: PermissionQuery = Depends(),
    params: PageParams = Depends(),
    permission_service: PermissionService = Depends(get_permission_service),
):
    """获取权限列表"""
    return await permission_service.list_permissions(query, params)


@admin_router.get("/tree", response_model=List[PermissionTreeNode])
async def get_permission_tree(
    permission_service: PermissionService = Depends(get_permission_service),
):
    """获取完整权限树, 按 sort_order 排序"""
    return await permission_service.get_permission_tree()


@admin_router.get("/options", response_model=List[OptionItem])
async def get_permission_options(
    permission_service: PermissionService = Depends(get_permission_service),
):
    return await permission_service.get_permission_options()


@admin_router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(
    permission_id: int,
    permission_service: PermissionService = Depends(get_permission_service),
):
    return await permission_service.get_permission(permission_id)


@admin_router.post(
    "", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED
)
async def create_permission(
    permission_data: PermissionCreate,
    permission_service: PermissionService = Depends(get_permission_service),
):
    """
    创建权限

    - **perm_type**: 1菜单, 2按钮, 3接口
    - **api_path**: 接口类型必填, 格式 METHOD:/path, 以 /* 结尾表示前缀匹配
    """
    return await permission_service.create_permission(permission_data)


@admin_router.put("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: int,
    permission_data: PermissionUpdate,
    permission_service: PermissionService = Depends(get_permission_service),
):
    """更新权限, 只更新提交的字段; 修改父权限时不能形成环"""
    return await permission_service.update_permission(permission_id, permission_data)


@admin_router.put("/{permission_id}/status", response_model=PermissionResponse)
async def update_permission_status(
    permission_id: int,
    status_data: StatusUpdate,
    permission_service: PermissionService = Depends(get_permission_service),
):
    return await permission_service.update_permission_status(
        permission_id, status_data.enabled
    )


@admin_router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission(
    permission_id: int,
    permission_service: PermissionService = Depends(get_permission_service),
):
    """删除权限, 存在子权限或已分配给角色时拒绝"""
    await permission_service.delete_permission(permission_id)
    return None
