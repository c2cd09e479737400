"""
分类相关的 Pydantic 模型
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from blog_server.schemas.base import BaseResponseModel


class CategoryBase(BaseModel):
    """分类基础模型"""

    category_name: str = Field(..., min_length=1, max_length=50, description="分类名称")
    category_key: str = Field(
        ..., min_length=1, max_length=50, pattern=r"^[a-z0-9][a-z0-9_-]*$", description="分类标识"
    )
    parent_id: Optional[int] = Field(None, ge=0, description="父分类ID, 0或空为根分类")
    description: Optional[str] = None
    thumbnail: Optional[str] = Field(None, max_length=255)
    icon: Optional[str] = Field(None, max_length=100)
    sort_order: int = Field(default=0)
    is_visible: bool = Field(default=True)
    seo_title: Optional[str] = Field(None, max_length=100)
    seo_keywords: Optional[str] = Field(None, max_length=200)
    seo_description: Optional[str] = Field(None, max_length=300)


class CategoryCreate(CategoryBase):
    """创建分类请求模型"""

    ...


class CategoryUpdate(BaseModel):
    """更新分类请求模型, 只更新提交的字段; parent_id 提交 0 表示移动为根分类"""

    category_name: Optional[str] = Field(None, min_length=1, max_length=50)
    category_key: Optional[str] = Field(
        None, min_length=1, max_length=50, pattern=r"^[a-z0-9][a-z0-9_-]*$"
    )
    parent_id: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    thumbnail: Optional[str] = Field(None, max_length=255)
    icon: Optional[str] = Field(None, max_length=100)
    sort_order: Optional[int] = None
    is_visible: Optional[bool] = None
    seo_title: Optional[str] = Field(None, max_length=100)
    seo_keywords: Optional[str] = Field(None, max_length=200)
    seo_description: Optional[str] = Field(None, max_length=300)


class CategoryResponse(BaseResponseModel):
    """分类列表项响应模型"""

    id: int
    parent_id: Optional[int] = None
    category_name: str
    category_key: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int
    is_visible: bool
    article_count: int
    created_at: datetime
    updated_at: datetime


class CategoryDetailResponse(CategoryResponse):
    """分类详情响应模型"""

    path: str
    seo_title: Optional[str] = None
    seo_keywords: Optional[str] = None
    seo_description: Optional[str] = None


class CategoryTreeNode(BaseResponseModel):
    """分类树节点"""

    id: int
    parent_id: Optional[int] = None
    category_name: str
    category_key: str
    icon: Optional[str] = None
    sort_order: int = 0
    is_visible: bool = True
    article_count: int = 0
    children: List["CategoryTreeNode"] = []


class CategoryQuery(BaseModel):
    """分类列表筛选条件"""

    category_name: Optional[str] = None
    parent_id: Optional[int] = None
    is_visible: Optional[bool] = None


class DescendantCheck(BaseModel):
    """子孙关系判断结果"""

    category_id: int
    ancestor_id: int
    is_descendant: bool
