"""Unit tests for the subtree path rewrite statement of CategoryRepository."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from blog_server.repositories.category_repository import CategoryRepository


def make_repo():
    session = AsyncMock()
    session.execute.return_value = MagicMock(rowcount=0)
    return CategoryRepository(session), session


async def rewrite(paths, old_prefix, new_prefix):
    """
    生成改写语句, 再按 PostgreSQL 的 LIKE / concat / substr 语义作用到 paths 上

    substr 的起始位置从 1 开始计数
    """
    repo, session = make_repo()
    await repo.update_subtree_paths(old_prefix, new_prefix)
    stmt = session.execute.await_args.args[0]
    params = stmt.compile(dialect=postgresql.dialect()).params

    start = next(v for v in params.values() if isinstance(v, int))
    like_prefix = next(v for v in params.values() if isinstance(v, str) and v.endswith("."))
    concat_head = next(
        v for v in params.values() if isinstance(v, str) and not v.endswith(".")
    )
    return [
        concat_head + path[start - 1 :] if path.startswith(like_prefix) else path
        for path in paths
    ]


@pytest.mark.asyncio
async def test_statement_shape():
    repo, session = make_repo()

    await repo.update_subtree_paths("1.4", "2.4")

    stmt = session.execute.await_args.args[0]
    sql = str(stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))
    assert sql.startswith("UPDATE cms_categories SET")
    assert "concat('2.4', substr(cms_categories.path, 4))" in sql
    assert "LIKE '1.4.'" in sql
    session.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_rewrites_only_descendants():
    paths = ["1", "1.4", "1.4.9", "1.4.9.12", "1.40", "1.40.7", "2"]

    result = await rewrite(paths, "1.4", "2.4")

    # 自身路径由服务层单独更新
    assert result == ["1", "1.4", "2.4.9", "2.4.9.12", "1.40", "1.40.7", "2"]


@pytest.mark.asyncio
async def test_repeated_reparent_keeps_paths_consistent():
    paths = ["1", "1.4", "1.4.9", "1.4.9.12", "1.40", "2"]

    # 4 移到 2 下
    paths = await rewrite(paths, "1.4", "2.4")
    paths[paths.index("1.4")] = "2.4"
    assert paths == ["1", "2.4", "2.4.9", "2.4.9.12", "1.40", "2"]

    # 再移到 1.40 下, 新前缀比旧前缀长
    paths = await rewrite(paths, "2.4", "1.40.4")
    paths[paths.index("2.4")] = "1.40.4"
    assert paths == ["1", "1.40.4", "1.40.4.9", "1.40.4.9.12", "1.40", "2"]

    # 移到根, 新前缀比旧前缀短
    paths = await rewrite(paths, "1.40.4", "4")
    paths[paths.index("1.40.4")] = "4"
    assert paths == ["1", "4", "4.9", "4.9.12", "1.40", "2"]


@pytest.mark.asyncio
async def test_returns_rowcount():
    repo, session = make_repo()
    session.execute.return_value = MagicMock(rowcount=3)

    assert await repo.update_subtree_paths("1.4", "2.4") == 3
