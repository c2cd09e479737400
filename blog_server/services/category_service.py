"""
分类管理服务

分类的 path 字段保存从根到自身的ID序列, 写入时维护:
- 根分类: path = "{id}"
- 子分类: path = "{parent.path}.{id}"
- 修改父分类时重新计算自身路径, 并在同一事务中改写全部子孙分类的路径前缀
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from blog_server.core.exceptions import BadRequestError, ConflictError, NotFoundError
from blog_server.models.category import PATH_SEPARATOR, Category
from blog_server.repositories.base import drop_null_required
from blog_server.repositories.category_repository import CategoryRepository
from blog_server.schemas.base import OptionItem, PageParams, PageResult
from blog_server.schemas.category import (
    CategoryCreate,
    CategoryQuery,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
)
from blog_server.utils.tree import build_tree, is_root_node


def build_category_path(parent_path: Optional[str], category_id: int) -> str:
    if not parent_path:
        return str(category_id)
    return f"{parent_path}{PATH_SEPARATOR}{category_id}"


def path_is_descendant(path: str, ancestor_path: str) -> bool:
    """path 是否位于 ancestor_path 之下 (不含相等)"""
    return bool(ancestor_path) and path.startswith(ancestor_path + PATH_SEPARATOR)


def path_contains(path: str, category_id: int) -> bool:
    """category_id 是否是路径上的一个节点"""
    return str(category_id) in path.split(PATH_SEPARATOR)


class CategoryService:
    def __init__(
        self, session: AsyncSession, repo: Optional[CategoryRepository] = None
    ) -> None:
        self.session = session
        self.repo = repo or CategoryRepository(session)

    async def get_category(self, category_id: int, visible_only: bool = False) -> Category:
        category = await self.repo.get(category_id)
        if category is None or (visible_only and not category.is_visible):
            raise NotFoundError("分类不存在")
        return category

    async def list_categories(
        self, query: CategoryQuery, params: PageParams
    ) -> PageResult[CategoryResponse]:
        items, total = await self.repo.list_categories(
            query.model_dump(exclude_none=True), params.offset, params.page_size
        )
        return PageResult.create(
            [CategoryResponse.model_validate(c) for c in items], total, params
        )

    async def get_category_tree(self, visible_only: bool = False) -> List[CategoryTreeNode]:
        """
        分类树

        visible_only=True 时隐藏分类不参与构建, 其子孙分类也随之不出现
        """
        categories = await self.repo.get_all_ordered(visible_only=visible_only)
        return build_tree(CategoryTreeNode.model_validate(c) for c in categories)

    async def get_category_options(self) -> List[OptionItem]:
        categories = await self.repo.get_all_ordered()
        return [OptionItem(label=c.category_name, value=c.id) for c in categories]

    async def get_descendants(self, category_id: int) -> List[Category]:
        category = await self.get_category(category_id)
        return await self.repo.get_descendants(category.path)

    async def is_descendant(self, category_id: int, ancestor_id: int) -> bool:
        category = await self.get_category(category_id)
        ancestor = await self.get_category(ancestor_id)
        return path_is_descendant(category.path, ancestor.path)

    async def create_category(self, data: CategoryCreate) -> Category:
        await self._check_unique(data.category_name, data.category_key)

        parent: Optional[Category] = None
        if not is_root_node(data.parent_id):
            parent = await self.repo.get(data.parent_id)
            if parent is None:
                raise BadRequestError("父分类不存在")

        values = data.model_dump()
        values["parent_id"] = parent.id if parent else None
        # 路径依赖自增ID, 先插入再回填
        category = await self.repo.create(**values, path="")
        category = await self.repo.update(
            category, path=build_category_path(parent.path if parent else None, category.id)
        )
        await self.session.commit()

        logger.info(f"分类创建成功: {category.category_key} (ID: {category.id}, path: {category.path})")
        return category

    async def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        category = await self.get_category(category_id)
        values = drop_null_required(Category, data.model_dump(exclude_unset=True))

        await self._check_unique(
            values.get("category_name"), values.get("category_key"), exclude_id=category_id
        )

        if "parent_id" in values:
            new_parent_id = None if is_root_node(values["parent_id"]) else values["parent_id"]
            values["parent_id"] = new_parent_id
            if new_parent_id != category.parent_id:
                values["path"] = await self._move(category, new_parent_id)

        category = await self.repo.update(category, **values)
        await self.session.commit()

        logger.info(f"分类更新成功: {category.category_key} (ID: {category_id})")
        return category

    async def update_category_status(self, category_id: int, visible: bool) -> Category:
        category = await self.get_category(category_id)
        category = await self.repo.update(category, is_visible=visible)
        await self.session.commit()
        logger.info(f"分类状态更新: ID={category_id}, is_visible={visible}")
        return category

    async def delete_category(self, category_id: int) -> None:
        """删除分类, 存在子分类或分类下有文章时拒绝"""
        category = await self.get_category(category_id)

        if await self.repo.count_children(category_id) > 0:
            raise BadRequestError("存在子分类, 不能删除")
        if category.article_count > 0:
            raise BadRequestError("分类下有文章, 不能删除")

        await self.repo.delete(category)
        await self.session.commit()
        logger.info(f"分类删除成功: {category.category_key} (ID: {category_id})")

    async def _move(self, category: Category, new_parent_id: Optional[int]) -> str:
        """
        校验新的父分类并改写子孙路径

        Returns:
            str: 分类自身的新路径
        """
        parent_path: Optional[str] = None
        if new_parent_id is not None:
            if new_parent_id == category.id:
                raise BadRequestError("父分类不能是自身")
            parent = await self.repo.get(new_parent_id)
            if parent is None:
                raise BadRequestError("父分类不存在")
            if path_contains(parent.path, category.id):
                raise BadRequestError("不能移动到自身的子分类下")
            parent_path = parent.path

        old_path = category.path
        new_path = build_category_path(parent_path, category.id)
        if old_path and old_path != new_path:
            count = await self.repo.update_subtree_paths(old_path, new_path)
            logger.info(
                f"分类移动: ID={category.id}, {old_path} -> {new_path}, 子孙分类数量={count}"
            )
        return new_path

    async def _check_unique(
        self,
        category_name: Optional[str],
        category_key: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> None:
        if category_name and await self.repo.exists_by_field(
            "category_name", category_name, exclude_id
        ):
            raise ConflictError("分类名称已存在")
        if category_key and await self.repo.exists_by_field(
            "category_key", category_key, exclude_id
        ):
            raise ConflictError("分类标识已存在")
