"""Unit tests for TagService."""

from unittest.mock import AsyncMock

import pytest

from blog_server.core.exceptions import BadRequestError, ConflictError, NotFoundError
from blog_server.schemas.base import PageParams
from blog_server.schemas.tag import TagUpdate
from blog_server.services.tag_service import TagService
from tests.factories import apply_update, make_tag


def make_service(tags=()):
    by_id = {t.id: t for t in tags}
    mock_repo = AsyncMock()
    mock_repo.get.side_effect = lambda tag_id: by_id.get(tag_id)
    mock_repo.exists_by_field.return_value = False
    mock_repo.update.side_effect = apply_update
    return TagService(AsyncMock(), repo=mock_repo), mock_repo


@pytest.mark.asyncio
async def test_tag_with_articles_cannot_be_deleted():
    service, mock_repo = make_service([make_tag(1, article_count=2)])

    with pytest.raises(BadRequestError):
        await service.delete_tag(1)

    mock_repo.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_unused_tag():
    tag = make_tag(1)
    service, mock_repo = make_service([tag])

    await service.delete_tag(1)

    mock_repo.delete.assert_awaited_once_with(tag)


@pytest.mark.asyncio
async def test_missing_tag():
    service, _ = make_service()

    with pytest.raises(NotFoundError):
        await service.get_tag(99)


@pytest.mark.asyncio
async def test_rename_to_existing_key_conflicts():
    service, mock_repo = make_service([make_tag(1)])
    mock_repo.exists_by_field.return_value = True

    with pytest.raises(ConflictError):
        await service.update_tag(1, TagUpdate(tag_key="python"))

    mock_repo.exists_by_field.assert_awaited_with("tag_key", "python", 1)


@pytest.mark.asyncio
async def test_list_tags_pages():
    service, mock_repo = make_service()
    mock_repo.list_tags.return_value = ([make_tag(3), make_tag(4)], 12)

    result = await service.list_tags(PageParams(page=2, page_size=5), visible_only=True)

    assert [t.id for t in result.list] == [3, 4]
    assert result.total == 12
    assert result.pages == 3
    mock_repo.list_tags.assert_called_once_with(5, 5, keyword=None, visible_only=True)


@pytest.mark.asyncio
async def test_null_for_required_fields_is_ignored():
    service, mock_repo = make_service([make_tag(1)])

    tag = await service.update_tag(
        1, TagUpdate.model_validate({"tag_name": None, "is_visible": None, "description": None})
    )

    assert mock_repo.update.await_args.kwargs == {"description": None}
    assert tag.tag_name == "tag-1"
