from __future__ import annotations

from typing import Any

import pytest

from hetzner_cli.errors import APIError
from hetzner_cli.http import list_all


class _Pages:
    def __init__(self, pages: dict[int, Any]) -> None:
        self.pages = pages
        self.calls: list[dict[str, Any]] = []

    async def request_json(self, method: str, path: str, *, params: Any = None) -> Any:
        self.calls.append(dict(params or {}))
        page = self.pages[params["page"]]
        if isinstance(page, Exception):
            raise page
        return page


def _page(start: int, count: int, next_page: int | None) -> dict[str, Any]:
    return {
        "servers": [{"id": start + offset} for offset in range(count)],
        "meta": {"pagination": {"page": 1, "next_page": next_page}},
    }


@pytest.mark.asyncio
async def test_collects_all_pages_in_order() -> None:
    pages = _Pages({1: _page(0, 50, 2), 2: _page(50, 10, None)})

    items = await list_all(pages, "/servers", "servers")

    assert [item["id"] for item in items] == list(range(60))
    assert len(pages.calls) == 2
    assert pages.calls[0] == {"page": 1, "per_page": 50}
    assert pages.calls[1] == {"page": 2, "per_page": 50}


@pytest.mark.asyncio
async def test_empty_page_stops_even_with_next_cursor() -> None:
    pages = _Pages({1: _page(0, 3, 2), 2: {"servers": [], "meta": {"pagination": {"next_page": 3}}}})

    items = await list_all(pages, "/servers", "servers")

    assert len(items) == 3
    assert len(pages.calls) == 2


@pytest.mark.asyncio
async def test_missing_meta_keeps_first_page() -> None:
    pages = _Pages({1: {"servers": [{"id": 1}, {"id": 2}]}})

    items = await list_all(pages, "/servers", "servers")

    assert items == [{"id": 1}, {"id": 2}]
    assert len(pages.calls) == 1


@pytest.mark.asyncio
async def test_filters_are_sent_on_every_page() -> None:
    pages = _Pages({1: _page(0, 1, 2), 2: _page(1, 1, None)})

    await list_all(pages, "/servers", "servers", {"label_selector": "env=prod", "name": None}, per_page=1)

    for call in pages.calls:
        assert call["label_selector"] == "env=prod"
        assert call["per_page"] == 1
        assert "name" not in call


@pytest.mark.asyncio
async def test_failing_page_propagates() -> None:
    pages = _Pages({1: _page(0, 2, 2), 2: APIError(status_code=500, status_text="Internal Server Error")})

    with pytest.raises(APIError):
        await list_all(pages, "/servers", "servers")


@pytest.mark.asyncio
async def test_empty_first_page_makes_one_request() -> None:
    pages = _Pages({1: {"servers": [], "meta": {"pagination": {"next_page": None}}}})

    assert await list_all(pages, "/servers", "servers") == []
    assert len(pages.calls) == 1
