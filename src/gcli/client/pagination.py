"""Page-by-page iteration over GitHub collection endpoints.

GitHub paginates collections with a ``Link`` response header::

    Link: <https://api.github.com/user/repos?page=2>; rel="next", ...

The URL under ``rel="next"`` is the continuation token for the following
page; its absence marks the last page.  :class:`PaginatedCursor` wraps that
protocol so the renderer can ask for pages one at a time without knowing
anything about HTTP.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx

Page = tuple[list[Any], Optional[str]]
"""A page of records plus the continuation token for the next one."""


def next_page_url(response: httpx.Response) -> Optional[str]:
    """Return the ``rel="next"`` URL of *response*, or ``None`` on the last page."""
    return response.links.get("next", {}).get("url")


def extract_records(data: Any, items_key: Optional[str] = None) -> list[Any]:
    """Pull the record list out of a page body.

    Most endpoints return a bare JSON array.  Search endpoints wrap it as
    ``{"total_count": ..., "items": [...]}``; *items_key* names the wrapper
    key in that case.
    """
    if data is None:
        return []
    if items_key and isinstance(data, dict):
        data = data.get(items_key, [])
    if isinstance(data, list):
        return data
    return [data]


class PaginatedCursor:
    """Sequential cursor over the pages of one collection.

    The first page is fetched when the cursor is created (it is the result
    of the remote call itself) and handed out by the first :meth:`next`
    call.  Every later call fetches exactly one page using the token
    returned by the previous one.

    Args:
        records: Records of the first page.
        next_token: Continuation token returned with the first page.
        fetch: Callable that takes a token and returns the next
            ``(records, next_token)`` pair.
    """

    def __init__(
        self,
        records: list[Any],
        next_token: Optional[str],
        fetch: Callable[[str], Page],
    ) -> None:
        self._first: Optional[list[Any]] = list(records)
        self._token = next_token
        self._fetch = fetch

    @property
    def next_token(self) -> Optional[str]:
        """Token for the page after the last one handed out."""
        return self._token

    @property
    def exhausted(self) -> bool:
        return self._first is None and self._token is None

    def next(self) -> Page:
        """Return the next page as ``(records, next_token_or_None)``."""
        if self._first is not None:
            records, self._first = self._first, None
            return records, self._token
        if self._token is None:
            return [], None
        records, self._token = self._fetch(self._token)
        return records, self._token
