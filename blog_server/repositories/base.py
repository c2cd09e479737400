"""
仓储基类
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from blog_server.core.db import Base

T = TypeVar("T", bound=Base)


def drop_null_required(model: Type[Base], values: Dict[str, Any]) -> Dict[str, Any]:
    """
    去掉非空列上的 None 值

    部分更新时请求体中显式的 null 视为未提交该字段, 可空列 (如 parent_id) 保留 None
    """
    columns = model.__table__.columns
    cleaned = {}
    for key, value in values.items():
        column = columns.get(key)
        if value is None and column is not None and not column.nullable:
            continue
        cleaned[key] = value
    return cleaned


class BaseRepository(Generic[T]):
    """通用 CRUD 操作, 只 flush 不 commit, 事务由服务层提交"""

    model: Type[T]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, id: int) -> Optional[T]:
        """按主键查询, 不存在时返回 None"""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: Sequence[int]) -> List[T]:
        if not ids:
            return []
        result = await self.session.execute(
            select(self.model).where(self.model.id.in_(set(ids)))
        )
        return list(result.scalars().all())

    async def get_by_field(self, field: str, value: Any) -> Optional[T]:
        """按唯一字段查询"""
        result = await self.session.execute(
            select(self.model).where(getattr(self.model, field) == value)
        )
        return result.scalar_one_or_none()

    async def exists_by_field(
        self, field: str, value: Any, exclude_id: Optional[int] = None
    ) -> bool:
        """
        判断唯一字段取值是否已被占用

        Args:
            field: 字段名
            value: 字段值
            exclude_id: 排除的记录ID, 更新时传入自身ID
        """
        stmt = select(func.count()).select_from(self.model).where(
            getattr(self.model, field) == value
        )
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def paginate(
        self, stmt: Select, offset: int, limit: int
    ) -> tuple[List[T], int]:
        """
        对查询语句分页

        Returns:
            (当前页记录, 总数)
        """
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = (await self.session.execute(count_stmt)).scalar_one()
        result = await self.session.execute(stmt.offset(offset).limit(limit))
        return list(result.scalars().all()), total

    async def create(self, **kwargs: Any) -> T:
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: T, **kwargs: Any) -> T:
        """逐字段更新, 只处理模型上存在的字段"""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        await self.session.flush()
        # updated_at 由数据库生成, 需要重新加载
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: T) -> None:
        await self.session.delete(instance)
        await self.session.flush()
