"""
分类仓储

子孙查询基于物化路径前缀, 不需要递归查询
"""

from typing import Any, Dict, List

from sqlalchemy import func, select, update

from blog_server.models.category import PATH_SEPARATOR, Category
from blog_server.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    model = Category

    async def get_all_ordered(self, visible_only: bool = False) -> List[Category]:
        stmt = select(Category).order_by(Category.sort_order, Category.id)
        if visible_only:
            stmt = stmt.where(Category.is_visible.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_categories(
        self, filters: Dict[str, Any], offset: int, limit: int
    ) -> tuple[List[Category], int]:
        stmt = select(Category)
        if filters.get("category_name"):
            stmt = stmt.where(
                Category.category_name.ilike(f"%{filters['category_name']}%")
            )
        parent_id = filters.get("parent_id")
        if parent_id is not None:
            if parent_id == 0:
                stmt = stmt.where(Category.parent_id.is_(None))
            else:
                stmt = stmt.where(Category.parent_id == parent_id)
        if filters.get("is_visible") is not None:
            stmt = stmt.where(Category.is_visible.is_(filters["is_visible"]))
        stmt = stmt.order_by(Category.sort_order, Category.id)
        return await self.paginate(stmt, offset, limit)

    async def get_descendants(self, path: str) -> List[Category]:
        """路径以 path + "." 开头的全部分类, 不含自身"""
        result = await self.session.execute(
            select(Category)
            .where(Category.path.startswith(path + PATH_SEPARATOR, autoescape=True))
            .order_by(Category.path)
        )
        return list(result.scalars().all())

    async def count_children(self, category_id: int) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Category)
            .where(Category.parent_id == category_id)
        )
        return result.scalar_one()

    async def update_subtree_paths(self, old_prefix: str, new_prefix: str) -> int:
        """
        把子孙分类路径中的 old_prefix 替换为 new_prefix

        Returns:
            int: 更新的行数
        """
        result = await self.session.execute(
            update(Category)
            .where(Category.path.startswith(old_prefix + PATH_SEPARATOR, autoescape=True))
            .values(
                path=func.concat(
                    new_prefix, func.substr(Category.path, len(old_prefix) + 1)
                )
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount

