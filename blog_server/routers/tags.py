"""
标签路由

- router: 前台公开接口 (/api/v1/tags)
- admin_router: 标签管理接口 (/admin/api/v1/tags)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from blog_server.dependencies.services import get_tag_service
from blog_server.schemas.base import OptionItem, PageParams, PageResult
from blog_server.schemas.tag import TagCreate, TagResponse, TagUpdate
from blog_server.services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["标签"])
admin_router = APIRouter(prefix="/tags", tags=["标签管理"])


@router.get("", response_model=PageResult[TagResponse])
async def list_public_tags(
    keyword: Optional[str] = Query(None, description="标签名称, 模糊匹配"),
    params: PageParams = Depends(),
    tag_service: TagService = Depends(get_tag_service),
):
    """前台标签列表, 只返回可见标签"""
    return await tag_service.list_tags(params, keyword=keyword, visible_only=True)


@admin_router.get("", response_model=PageResult[TagResponse])
async def list_tags(
    keyword: Optional[str] = Query(None, description="标签名称, 模糊匹配"),
    params: PageParams = Depends(),
    tag_service: TagService = Depends(get_tag_service),
):
    return await tag_service.list_tags(params, keyword=keyword)


@admin_router.get("/options", response_model=List[OptionItem])
async def get_tag_options(tag_service: TagService = Depends(get_tag_service)):
    return await tag_service.get_tag_options()


@admin_router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(
    tag_id: int,
    tag_service: TagService = Depends(get_tag_service),
):
    return await tag_service.get_tag(tag_id)


@admin_router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_data: TagCreate,
    tag_service: TagService = Depends(get_tag_service),
):
    return await tag_service.create_tag(tag_data)


@admin_router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: int,
    tag_data: TagUpdate,
    tag_service: TagService = Depends(get_tag_service),
):
    """更新标签, 只更新提交的字段"""
    return await tag_service.update_tag(tag_id, tag_data)


@admin_router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: int,
    tag_service: TagService = Depends(get_tag_service),
):
    """删除标签, 标签下有文章时拒绝"""
    await tag_service.delete_tag(tag_id)
    return None
