"""Search client that issues search engine commands over a transport port.

Command arguments are built by the module-level `*_args` helpers, which are
pure and shared with the async client. The client sends them through
`TransportPort.execute` and decodes the raw replies.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .aggregate import AggregateOptions
from .contracts import TransportPort
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
from .iterator import SearchIterator
from .query import QueryOptions
from .results import AggregateResults, QueryResults
from .schema import IndexOptions
from .types import CommandArgs, RawReply

logger = logging.getLogger(__name__)


def search_args(index: str, query: str, options: Optional[QueryOptions] = None) -> CommandArgs:
    """Build the full `FT.SEARCH` command."""

    return ["FT.SEARCH", index, query, *(options or QueryOptions()).serialize()]


def aggregate_args(
    index: str, query: str, options: Optional[AggregateOptions] = None
) -> CommandArgs:
    """Build the full `FT.AGGREGATE` command."""

    return ["FT.AGGREGATE", index, query, *(options or AggregateOptions()).serialize()]


def create_index_args(index: str, options: IndexOptions) -> CommandArgs:
    """Build the full `FT.CREATE` command."""

    return ["FT.CREATE", index, *options.serialize()]


def drop_index_args(index: str, delete_documents: bool = False) -> CommandArgs:
    args: CommandArgs = ["FT.DROPINDEX", index]
    if delete_documents:
        args.append("DD")
    return args


def cursor_read_args(index: str, cursor_id: int, count: Optional[int] = None) -> CommandArgs:
    args: CommandArgs = ["FT.CURSOR", "READ", index, cursor_id]
    if count:
        args.extend(("COUNT", count))
    return args


def synonym_update_args(
    index: str, group: str, terms: Sequence[str], *, skip_initial_scan: bool = False
) -> CommandArgs:
    args: CommandArgs = ["FT.SYNUPDATE", index, group]
    if skip_initial_scan:
        args.append("SKIPINITIALSCAN")
    args.extend(terms)
    return args


class SearchClient:
    """High-level search operations backed by a transport port."""

    def __init__(self, transport: TransportPort) -> None:
        """Create a search client.

        Args:
            transport: Adapter that executes one command and returns the raw
                reply, such as `RedisTransport`.
        """

        self.transport = transport

    def execute(self, args: CommandArgs) -> RawReply:
        logger.debug("Executing %s", args[0])
        return self.transport.execute(args)

    def search(
        self,
        index: str,
        query: str,
        options: Optional[QueryOptions] = None,
        *,
        on_json: bool = False,
    ) -> QueryResults:
        """Run `FT.SEARCH` and decode one page of results.

        Args:
            index: Index name.
            query: Query string, for example `@id:{1121175}`.
            options: Search options; defaults to `QueryOptions()`.
            on_json: Decode record content as JSON documents instead of hashes.

        Returns:
            The decoded page.
        """

        options = options or QueryOptions()
        reply = self.execute(search_args(index, query, options))
        return decode_search_reply(reply, options, on_json=on_json)

    def iterate(
        self,
        index: str,
        query: str,
        options: Optional[QueryOptions] = None,
        *,
        on_json: bool = False,
    ) -> SearchIterator:
        """Fetch the first page and return an iterator over every matching record.

        The iterator advances `options.limit.offset` in place while paging.
        """

        options = options if options is not None else QueryOptions()
        page = self.search(index, query, options, on_json=on_json)

        def fetch(next_options: QueryOptions) -> QueryResults:
            return self.search(index, query, next_options, on_json=on_json)

        return SearchIterator(fetch, options, page)

    def aggregate(
        self, index: str, query: str, options: Optional[AggregateOptions] = None
    ) -> AggregateResults:
        options = options or AggregateOptions()
        reply = self.execute(aggregate_args(index, query, options))
        return decode_aggregate_reply(reply, options)

    def cursor_read(
        self, index: str, cursor_id: int, count: Optional[int] = None
    ) -> AggregateResults:
        """Read the next page of an aggregate cursor."""

        reply = self.execute(cursor_read_args(index, cursor_id, count))
        return decode_aggregate_reply(reply, with_cursor=True)

    def cursor_delete(self, index: str, cursor_id: int) -> bool:
        return decode_ok(self.execute(["FT.CURSOR", "DEL", index, cursor_id]))

    def create_index(self, index: str, options: IndexOptions) -> bool:
        return decode_ok(self.execute(create_index_args(index, options)))

    def drop_index(self, index: str, delete_documents: bool = False) -> bool:
        return decode_ok(self.execute(drop_index_args(index, delete_documents)))

    def info(self, index: str) -> Info:
        return parse_info(self.execute(["FT.INFO", index]))

    def list_indexes(self) -> List[str]:
        return decode_string_list(self.execute(["FT._LIST"]))

    def tag_values(self, index: str, field: str) -> List[str]:
        return decode_string_list(self.execute(["FT.TAGVALS", index, field]))

    def config_get(self, option: str = "*") -> Dict[str, str]:
        return decode_config_reply(self.execute(["FT.CONFIG", "GET", option]))

    def config_set(self, option: str, value: str) -> bool:
        return decode_ok(self.execute(["FT.CONFIG", "SET", option, value]))

    def dict_add(self, dictionary: str, *terms: str) -> int:
        return decode_int(self.execute(["FT.DICTADD", dictionary, *terms]))

    def dict_delete(self, dictionary: str, *terms: str) -> int:
        return decode_int(self.execute(["FT.DICTDEL", dictionary, *terms]))

    def dict_dump(self, dictionary: str) -> List[str]:
        return decode_string_list(self.execute(["FT.DICTDUMP", dictionary]))

    def synonym_update(
        self, index: str, group: str, *terms: str, skip_initial_scan: bool = False
    ) -> bool:
        args = synonym_update_args(index, group, terms, skip_initial_scan=skip_initial_scan)
        return decode_ok(self.execute(args))

    def synonym_dump(self, index: str) -> Dict[str, List[str]]:
        return decode_synonym_dump(self.execute(["FT.SYNDUMP", index]))

    def alias_add(self, alias: str, index: str) -> bool:
        return decode_ok(self.execute(["FT.ALIASADD", alias, index]))

    def alias_delete(self, alias: str) -> bool:
        return decode_ok(self.execute(["FT.ALIASDEL", alias]))

    def alias_update(self, alias: str, index: str) -> bool:
        return decode_ok(self.execute(["FT.ALIASUPDATE", alias, index]))
