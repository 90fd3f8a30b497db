"""Async search client over a sync or async transport port."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ._async_utils import _maybe_await
from .aggregate import AggregateOptions
from .client import (
    aggregate_args,
    create_index_args,
    cursor_read_args,
    drop_index_args,
    search_args,
    synonym_update_args,
)
from .contracts import AsyncTransportPort, TransportPort
from .decoder import (
    decode_aggregate_reply,
    decode_config_reply,
    decode_int,
    decode_ok,
    decode_search_reply,
    decode_string_list,
    decode_synonym_dump,
)
from .info import Info, parse_info
from .iterator import AsyncSearchIterator
from .query import QueryOptions
from .results import AggregateResults, QueryResults
from .schema import IndexOptions
from .types import CommandArgs, RawReply

logger = logging.getLogger(__name__)


class AsyncSearchClient:
    """Async counterpart of `SearchClient`."""

    def __init__(self, transport: TransportPort | AsyncTransportPort) -> None:
        """Create an async search client.

        Args:
            transport: Transport adapter (sync or async).
        """

        self.transport = transport

    async def execute(self, args: CommandArgs) -> RawReply:
        logger.debug("Executing %s", args[0])
        return await _maybe_await(self.transport.execute(args))

    async def search(
        self,
        index: str,
        query: str,
        options: Optional[QueryOptions] = None,
        *,
        on_json: bool = False,
    ) -> QueryResults:
        options = options or QueryOptions()
        reply = await self.execute(search_args(index, query, options))
        return decode_search_reply(reply, options, on_json=on_json)

    async def iterate(
        self,
        index: str,
        query: str,
        options: Optional[QueryOptions] = None,
        *,
        on_json: bool = False,
    ) -> AsyncSearchIterator:
        """Fetch the first page and return an async iterator over every record."""

        options = options if options is not None else QueryOptions()
        page = await self.search(index, query, options, on_json=on_json)

        async def fetch(next_options: QueryOptions) -> QueryResults:
            return await self.search(index, query, next_options, on_json=on_json)

        return AsyncSearchIterator(fetch, options, page)

    async def aggregate(
        self, index: str, query: str, options: Optional[AggregateOptions] = None
    ) -> AggregateResults:
        options = options or AggregateOptions()
        reply = await self.execute(aggregate_args(index, query, options))
        return decode_aggregate_reply(reply, options)

    async def cursor_read(
        self, index: str, cursor_id: int, count: Optional[int] = None
    ) -> AggregateResults:
        reply = await self.execute(cursor_read_args(index, cursor_id, count))
        return decode_aggregate_reply(reply, with_cursor=True)

    async def cursor_delete(self, index: str, cursor_id: int) -> bool:
        return decode_ok(await self.execute(["FT.CURSOR", "DEL", index, cursor_id]))

    async def create_index(self, index: str, options: IndexOptions) -> bool:
        return decode_ok(await self.execute(create_index_args(index, options)))

    async def drop_index(self, index: str, delete_documents: bool = False) -> bool:
        return decode_ok(await self.execute(drop_index_args(index, delete_documents)))

    async def info(self, index: str) -> Info:
        return parse_info(await self.execute(["FT.INFO", index]))

    async def list_indexes(self) -> List[str]:
        return decode_string_list(await self.execute(["FT._LIST"]))

    async def tag_values(self, index: str, field: str) -> List[str]:
        return decode_string_list(await self.execute(["FT.TAGVALS", index, field]))

    async def config_get(self, option: str = "*") -> Dict[str, str]:
        return decode_config_reply(await self.execute(["FT.CONFIG", "GET", option]))

    async def config_set(self, option: str, value: str) -> bool:
        return decode_ok(await self.execute(["FT.CONFIG", "SET", option, value]))

    async def dict_add(self, dictionary: str, *terms: str) -> int:
        return decode_int(await self.execute(["FT.DICTADD", dictionary, *terms]))

    async def dict_delete(self, dictionary: str, *terms: str) -> int:
        return decode_int(await self.execute(["FT.DICTDEL", dictionary, *terms]))

    async def dict_dump(self, dictionary: str) -> List[str]:
        return decode_string_list(await self.execute(["FT.DICTDUMP", dictionary]))

    async def synonym_update(
        self, index: str, group: str, *terms: str, skip_initial_scan: bool = False
    ) -> bool:
        args = synonym_update_args(index, group, terms, skip_initial_scan=skip_initial_scan)
        return decode_ok(await self.execute(args))

    async def synonym_dump(self, index: str) -> Dict[str, List[str]]:
        return decode_synonym_dump(await self.execute(["FT.SYNDUMP", index]))

    async def alias_add(self, alias: str, index: str) -> bool:
        return decode_ok(await self.execute(["FT.ALIASADD", alias, index]))

    async def alias_delete(self, alias: str) -> bool:
        return decode_ok(await self.execute(["FT.ALIASDEL", alias]))

    async def alias_update(self, alias: str, index: str) -> bool:
        return decode_ok(await self.execute(["FT.ALIASUPDATE", alias, index]))
