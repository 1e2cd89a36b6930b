import pytest
from sqlalchemy import select

from vidhub.core.errors import ValidationError
from vidhub.models.models import Video
from vidhub.services.pagination.paginator import page_window, paginate, resolve_page_args


def test_page_window_middle_page():
    w = page_window(total=25, page=2, limit=10)
    assert w.total_pages == 3
    assert w.offset == 10
    assert w.has_prev_page is True
    assert w.has_next_page is True
    assert (w.prev_page, w.next_page) == (1, 3)


def test_page_window_last_page():
    w = page_window(total=25, page=3, limit=10)
    assert w.has_next_page is False
    assert w.next_page is None


def test_page_window_exact_multiple():
    assert page_window(total=20, page=1, limit=10).total_pages == 2


def test_page_window_beyond_end():
    w = page_window(total=5, page=4, limit=2)
    assert w.total_pages == 3
    assert w.has_next_page is False
    assert w.has_prev_page is True


def test_page_window_empty_result():
    w = page_window(total=0, page=1, limit=10)
    assert w.total_pages == 0
    assert w.has_next_page is False
    assert w.has_prev_page is False


def test_defaults_are_page_one_limit_ten():
    assert resolve_page_args(None, None) == (1, 10)


@pytest.mark.parametrize("page,limit", [(0, 10), (-1, 10), (1, 0), (1, -5)])
def test_non_positive_page_args_rejected(page, limit):
    with pytest.raises(ValidationError):
        resolve_page_args(page, limit)


def test_limit_above_max_is_rejected():
    assert resolve_page_args(1, 100) == (1, 100)
    with pytest.raises(ValidationError, match="at most 100"):
        resolve_page_args(1, 101)


@pytest.mark.asyncio
async def test_paginate_windows_rows(db, make_user, make_video):
    owner = await make_user("pager")
    for i in range(7):
        await make_video(owner, title=f"v{i}")

    stmt = select(Video).order_by(Video.created_at)
    first = await paginate(db, stmt, 1, 3, lambda row: row[0].title)
    assert first.items == ["v0", "v1", "v2"]
    assert first.total_items == 7
    assert first.total_pages == 3
    assert first.has_next_page is True
    assert first.has_prev_page is False

    last = await paginate(db, stmt, 3, 3, lambda row: row[0].title)
    assert last.items == ["v6"]
    assert last.has_next_page is False

    beyond = await paginate(db, stmt, 9, 3, lambda row: row[0].title)
    assert beyond.items == []
    assert beyond.has_next_page is False
