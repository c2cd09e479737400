"""
标签相关的 Pydantic 模型
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from blog_server.schemas.base import BaseResponseModel


class TagCreate(BaseModel):
    """创建标签请求模型"""

    tag_name: str = Field(..., min_length=1, max_length=50, description="标签名称")
    tag_key: str = Field(
        ..., min_length=1, max_length=50, pattern=r"^[a-z0-9][a-z0-9_-]*$", description="标签标识"
    )
    description: Optional[str] = None
    thumbnail: Optional[str] = Field(None, max_length=255)
    sort_order: int = Field(default=0)
    is_visible: bool = Field(default=True)


class TagUpdate(BaseModel):
    """更新标签请求模型, 只更新提交的字段"""

    tag_name: Optional[str] = Field(None, min_length=1, max_length=50)
    tag_key: Optional[str] = Field(
        None, min_length=1, max_length=50, pattern=r"^[a-z0-9][a-z0-9_-]*$"
    )
    description: Optional[str] = None
    thumbnail: Optional[str] = Field(None, max_length=255)
    sort_order: Optional[int] = None
    is_visible: Optional[bool] = None


class TagResponse(BaseResponseModel):
    """标签响应模型"""

    id: int
    tag_name: str
    tag_key: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    sort_order: int
    is_visible: bool
    article_count: int
    created_at: datetime
    updated_at: datetime
