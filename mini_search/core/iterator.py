"""Forward-only iterators that walk every page of a search.

An iterator starts from the first decoded page and the options that produced
it. When a page is exhausted it advances `limit.offset` on those same options
by the number of records just consumed, fetches the next page and continues.
The walk ends when a fetched page is empty or when the consumed offset has
reached the reported total. Fetch and decode errors propagate to the caller.

Iterators are not thread safe and cannot be rewound.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, Union

from ._async_utils import _maybe_await
from .query import DEFAULT_LIMIT, Limit, QueryOptions
from .results import QueryResult, QueryResults

logger = logging.getLogger(__name__)

PageFetcher = Callable[[QueryOptions], QueryResults]
AsyncPageFetcher = Callable[[QueryOptions], Union[Awaitable[QueryResults], QueryResults]]


class _PageCursor:
    """Page bookkeeping shared by the sync and async iterators."""

    def __init__(self, options: QueryOptions, page: QueryResults) -> None:
        self.options = options
        self.page = page
        self.position = -1
        self.offset = options.limit.offset if options.limit is not None else 0
        self.finished = False

    def step_within_page(self) -> bool:
        if self.position + 1 < len(self.page):
            self.position += 1
            return True
        return False

    def next_offset(self) -> Optional[int]:
        """Advance the options to the next page, or return `None` when done."""

        consumed = len(self.page)
        next_offset = self.offset + consumed
        if consumed == 0 or next_offset >= self.page.total_results:
            self.finished = True
            return None

        if self.options.limit is None:
            self.options.limit = Limit(next_offset, DEFAULT_LIMIT)
        else:
            self.options.limit.offset += consumed
        self.offset = next_offset
        return next_offset

    def replace_page(self, page: QueryResults) -> bool:
        self.page = page
        self.position = -1
        if not len(page):
            self.finished = True
            return False
        self.position = 0
        return True

    def current(self) -> QueryResult:
        if self.position < 0 or self.position >= len(self.page):
            raise IndexError("Iterator has no current record; call advance() first.")
        return self.page[self.position]


class SearchIterator:
    """Iterate over every record of a search, fetching pages on demand.

    Args:
        fetch: Callable that runs the search for the given options and
            returns the decoded page.
        options: Options used for the first page. Their `limit.offset` is
            advanced in place as pages are consumed.
        page: The already fetched first page.
    """

    def __init__(
        self, fetch: PageFetcher, options: QueryOptions, page: QueryResults
    ) -> None:
        self._fetch = fetch
        self._cursor = _PageCursor(options, page)

    @property
    def options(self) -> QueryOptions:
        return self._cursor.options

    @property
    def current(self) -> QueryResult:
        return self._cursor.current()

    def advance(self) -> bool:
        """Move to the next record; return `False` once the results are exhausted."""

        cursor = self._cursor
        if cursor.finished:
            return False
        if cursor.step_within_page():
            return True

        offset = cursor.next_offset()
        if offset is None:
            return False
        logger.debug("Fetching search page at offset %d", offset)
        return cursor.replace_page(self._fetch(cursor.options))

    def __iter__(self) -> SearchIterator:
        return self

    def __next__(self) -> QueryResult:
        if self.advance():
            return self.current
        raise StopIteration


class AsyncSearchIterator:
    """Async counterpart of `SearchIterator`.

    `fetch` may return either a page or an awaitable page.
    """

    def __init__(
        self, fetch: AsyncPageFetcher, options: QueryOptions, page: QueryResults
    ) -> None:
        self._fetch = fetch
        self._cursor = _PageCursor(options, page)

    @property
    def options(self) -> QueryOptions:
        return self._cursor.options

    @property
    def current(self) -> QueryResult:
        return self._cursor.current()

    async def advance(self) -> bool:
        cursor = self._cursor
        if cursor.finished:
            return False
        if cursor.step_within_page():
            return True

        offset = cursor.next_offset()
        if offset is None:
            return False
        logger.debug("Fetching search page at offset %d", offset)
        page: Any = await _maybe_await(self._fetch(cursor.options))
        return cursor.replace_page(page)

    def __aiter__(self) -> AsyncSearchIterator:
        return self

    async def __anext__(self) -> QueryResult:
        if await self.advance():
            return self.current
        raise StopAsyncIteration
