"""
标签管理服务
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from blog_server.core.exceptions import BadRequestError, ConflictError, NotFoundError
from blog_server.models.tag import Tag
from blog_server.repositories.base import drop_null_required
from blog_server.repositories.tag_repository import TagRepository
from blog_server.schemas.base import OptionItem, PageParams, PageResult
from blog_server.schemas.tag import TagCreate, TagResponse, TagUpdate


class TagService:
    def __init__(self, session: AsyncSession, repo: Optional[TagRepository] = None) -> None:
        self.session = session
        self.repo = repo or TagRepository(session)

    async def get_tag(self, tag_id: int) -> Tag:
        tag = await self.repo.get(tag_id)
        if tag is None:
            raise NotFoundError("标签不存在")
        return tag

    async def list_tags(
        self,
        params: PageParams,
        keyword: Optional[str] = None,
        visible_only: bool = False,
    ) -> PageResult[TagResponse]:
        items, total = await self.repo.list_tags(
            params.offset, params.page_size, keyword=keyword, visible_only=visible_only
        )
        return PageResult.create([TagResponse.model_validate(t) for t in items], total, params)

    async def get_tag_options(self) -> List[OptionItem]:
        items, _ = await self.repo.list_tags(0, 1000)
        return [OptionItem(label=t.tag_name, value=t.id) for t in items]

    async def create_tag(self, data: TagCreate) -> Tag:
        await self._check_unique(data.tag_name, data.tag_key)
        tag = await self.repo.create(**data.model_dump())
        await self.session.commit()
        logger.info(f"标签创建成功: {tag.tag_key} (ID: {tag.id})")
        return tag

    async def update_tag(self, tag_id: int, data: TagUpdate) -> Tag:
        tag = await self.get_tag(tag_id)
        values = drop_null_required(Tag, data.model_dump(exclude_unset=True))
        await self._check_unique(values.get("tag_name"), values.get("tag_key"), exclude_id=tag_id)

        tag = await self.repo.update(tag, **values)
        await self.session.commit()
        logger.info(f"标签更新成功: {tag.tag_key} (ID: {tag_id})")
        return tag

    async def delete_tag(self, tag_id: int) -> None:
        tag = await self.get_tag(tag_id)
        if tag.article_count > 0:
            raise BadRequestError("标签下有文章, 不能删除")

        await self.repo.delete(tag)
        await self.session.commit()
        logger.info(f"标签删除成功: {tag.tag_key} (ID: {tag_id})")

    async def _check_unique(
        self,
        tag_name: Optional[str],
        tag_key: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> None:
        if tag_name and await self.repo.exists_by_field("tag_name", tag_name, exclude_id):
            raise ConflictError("标签名称已存在")
        if tag_key and await self.repo.exists_by_field("tag_key", tag_key, exclude_id):
            raise ConflictError("标签标识已存在")
