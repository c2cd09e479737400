"""
分类路由

- router: 前台公开接口, 只返回可见分类 (/api/v1/categories)
- admin_router: 分类管理接口 (/admin/api/v1/categories)
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from blog_server.dependencies.services import get_category_service
from blog_server.schemas.base import OptionItem, PageParams, PageResult, StatusUpdate
from blog_server.schemas.category import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryQuery,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
    DescendantCheck,
)
from blog_server.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["分类"])
admin_router = APIRouter(prefix="/categories", tags=["分类管理"])


@router.get("/tree", response_model=List[CategoryTreeNode])
async def get_public_category_tree(
    category_service: CategoryService = Depends(get_category_service),
):
    """前台分类树, 隐藏分类及其子分类不返回"""
    return await category_service.get_category_tree(visible_only=True)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_public_category(
    category_id: int,
    category_service: CategoryService = Depends(get_category_service),
):
    return await category_service.get_category(category_id, visible_only=True)


@admin_router.get("", response_model=PageResult[CategoryResponse])
async def list_categories(
    query: CategoryQuery = Depends(),
    params: PageParams = Depends(),
    category_service: CategoryService = Depends(get_category_service),
):
    """
    获取分类列表

    - **parent_id**: 传 0 查询根分类
    """
    return await category_service.list_categories(query, params)


@admin_router.get("/tree", response_model=List[CategoryTreeNode])
async def get_category_tree(
    visible_only: bool = Query(False, description="是否只包含可见分类"),
    category_service: CategoryService = Depends(get_category_service),
):
    return await category_service.get_category_tree(visible_only=visible_only)


@admin_router.get("/options", response_model=List[OptionItem])
async def get_category_options(
    category_service: CategoryService = Depends(get_category_service),
):
    return await category_service.get_category_options()


@admin_router.get("/{category_id}", response_model=CategoryDetailResponse)
async def get_category(
    category_id: int,
    category_service: CategoryService = Depends(get_category_service),
):
    return await category_service.get_category(category_id)


@admin_router.get("/{category_id}/descendants", response_model=List[CategoryResponse])
async def get_category_descendants(
    category_id: int,
    category_service: CategoryService = Depends(get_category_service),
):
    """获取全部子孙分类, 按路径排序"""
    return await category_service.get_descendants(category_id)


@admin_router.get("/{category_id}/is-descendant", response_model=DescendantCheck)
async def check_category_descendant(
    category_id: int,
    ancestor_id: int = Query(..., description="祖先分类ID"),
    category_service: CategoryService = Depends(get_category_service),
):
    """判断分类是否位于另一个分类之下"""
    result = await category_service.is_descendant(category_id, ancestor_id)
    return DescendantCheck(
        category_id=category_id, ancestor_id=ancestor_id, is_descendant=result
    )


@admin_router.post(
    "", response_model=CategoryDetailResponse, status_code=status.HTTP_201_CREATED
)
async def create_category(
    category_data: CategoryCreate,
    category_service: CategoryService = Depends(get_category_service),
):
    """创建分类, parent_id 为空或 0 时创建根分类"""
    return await category_service.create_category(category_data)


@admin_router.put("/{category_id}", response_model=CategoryDetailResponse)
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    category_service: CategoryService = Depends(get_category_service),
):
    """更新分类, 修改 parent_id 时同步改写子孙分类的路径"""
    return await category_service.update_category(category_id, category_data)


@admin_router.put("/{category_id}/status", response_model=CategoryDetailResponse)
async def update_category_status(
    category_id: int,
    status_data: StatusUpdate,
    category_service: CategoryService = Depends(get_category_service),
):
    """显示/隐藏分类"""
    return await category_service.update_category_status(category_id, status_data.enabled)


@admin_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    category_service: CategoryService = Depends(get_category_service),
):
    """删除分类, 存在子分类或分类下有文章时拒绝"""
    await category_service.delete_category(category_id)
    return None
