"""
Schema 基类
提供通用的序列化功能和分页结构
"""

import math
from datetime import datetime
from typing import Any, Generic, List, TypeVar
from pydantic import BaseModel, Field, model_serializer


def serialize_datetime_fields(data: Any) -> Any:
    """
    递归地将所有 datetime 字段转换为 ISO 格式字符串

    Args:
        data: 要序列化的数据（可以是 dict, list, datetime 或其他类型）

    Returns:
        序列化后的数据
    """
    if isinstance(data, datetime):
        return data.isoformat()
    elif isinstance(data, dict):
        return {key: serialize_datetime_fields(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [serialize_datetime_fields(item) for item in data]
    elif isinstance(data, BaseModel):
        return serialize_datetime_fields(data.model_dump())
    else:
        return data


class BaseResponseModel(BaseModel):
    """
    响应模型基类

    自动将所有 datetime 字段序列化为 ISO 格式字符串
    所有响应模型应继承此类
    """

    class Config:
        from_attributes = True

    @model_serializer(mode="wrap")
    def serialize_model(self, serializer, _info):
        data = serializer(self)
        return serialize_datetime_fields(data)


T = TypeVar("T")


class PageParams(BaseModel):
    """分页查询参数"""

    page: int = Field(default=1, ge=1, description="页码")
    page_size: int = Field(default=10, ge=1, le=100, description="每页记录数")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PageResult(BaseModel, Generic[T]):
    """分页结果"""

    list: List[T]
    total: int
    page: int
    page_size: int
    pages: int

    @classmethod
    def create(cls, items: List[T], total: int, params: PageParams) -> "PageResult[T]":
        return cls(
            list=items,
            total=total,
            page=params.page,
            page_size=params.page_size,
            pages=math.ceil(total / params.page_size) if total else 0,
        )


class OptionItem(BaseModel):
    """下拉选项"""

    label: str
    value: int


class StatusUpdate(BaseModel):
    """启用/禁用或显示/隐藏状态更新请求"""

    enabled: bool = Field(..., description="目标状态")


class MessageResponse(BaseModel):
    """通用消息响应"""

    message: str
