"""
标签仓储
"""

from typing import List, Optional

from sqlalchemy import select

from blog_server.models.tag import Tag
from blog_server.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    model = Tag

    async def list_tags(
        self,
        offset: int,
        limit: int,
        keyword: Optional[str] = None,
        visible_only: bool = False,
    ) -> tuple[List[Tag], int]:
        stmt = select(Tag)
        if keyword:
            stmt = stmt.where(Tag.tag_name.ilike(f"%{keyword}%"))
        if visible_only:
            stmt = stmt.where(Tag.is_visible.is_(True))
        stmt = stmt.order_by(Tag.sort_order, Tag.id)
        return await self.paginate(stmt, offset, limit)
