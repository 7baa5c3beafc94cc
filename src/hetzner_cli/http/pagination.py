"""Cursor pagination for Cloud API list endpoints."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from hetzner_cli.constants import DEFAULT_PER_PAGE
from hetzner_cli.http.transport import QueryParams, clean_params

logger = logging.getLogger(__name__)


class JSONRequester(Protocol):
    async def request_json(self, method: str, path: str, *, params: QueryParams | None = None) -> Any: ...


async def list_all(
    transport: JSONRequester,
    path: str,
    resource_key: str,
    params: QueryParams | None = None,
    *,
    per_page: int = DEFAULT_PER_PAGE,
) -> list[dict[str, Any]]:
    """Fetch every page of ``path`` and return ``resource_key`` items in server order.

    Pages are requested strictly one after another, following
    ``meta.pagination.next_page``. Collection stops when a page has no items
    (that page contributes nothing) or when the cursor is missing or has no
    next page (that page's items are kept). A failing page request propagates
    unchanged and nothing collected so far is returned.
    """

    collected: list[dict[str, Any]] = []
    base = clean_params(params)
    page = 1

    while True:
        response = await transport.request_json("GET", path, params={**base, "page": page, "per_page": per_page})
        items = response.get(resource_key) if isinstance(response, dict) else None
        if not items:
            logger.debug("%s page %d returned no %s; stopping", path, page, resource_key)
            break
        collected.extend(items)

        meta = response.get("meta")
        pagination = meta.get("pagination") if isinstance(meta, dict) else None
        next_page = pagination.get("next_page") if isinstance(pagination, dict) else None
        if not next_page:
            break

        logger.debug("%s page %d yielded %d %s; next page %s", path, page, len(items), resource_key, next_page)
        page = int(next_page)

    return collected
