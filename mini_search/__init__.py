"""Client-side RediSearch command builder and reply decoder."""

from .core import (
    LOAD_ALL,
    AggregateApply,
    AggregateBuilder,
    AggregateCursor,
    AggregateFilter,
    AggregateGroupBy,
    AggregateLoad,
    AggregateOptions,
    AggregateReducer,
    AggregateResults,
    AggregateSort,
    AggregateSortKey,
    AsyncSearchClient,
    AsyncSearchIterator,
    GeoAttribute,
    GeoFilter,
    GeometryAttribute,
    GroupByBuilder,
    HashValue,
    IndexOptions,
    Info,
    JSONValue,
    Limit,
    NumericAttribute,
    QueryBuilder,
    QueryFilter,
    QueryHighlight,
    QueryOptions,
    QueryResult,
    QueryResults,
    QueryReturn,
    QuerySummarize,
    ReplyDecodeError,
    ReplyFormat,
    SchemaParseError,
    SearchClient,
    SearchError,
    SearchIterator,
    TagAttribute,
    TextAttribute,
    VectorAttribute,
    decode_aggregate_reply,
    decode_search_reply,
    detect_reply_format,
    filter_value,
    parse_attribute,
    parse_info,
)
from .ports import AsyncRedisTransport, RedisTransport

__all__ = [
    "SearchClient",
    "AsyncSearchClient",
    "RedisTransport",
    "AsyncRedisTransport",
    "SearchError",
    "ReplyDecodeError",
    "SchemaParseError",
    "QueryOptions",
    "QueryBuilder",
    "Limit",
    "QueryFilter",
    "GeoFilter",
    "QueryReturn",
    "QuerySummarize",
    "QueryHighlight",
    "filter_value",
    "AggregateOptions",
    "AggregateBuilder",
    "GroupByBuilder",
    "AggregateFilter",
    "AggregateGroupBy",
    "AggregateApply",
    "AggregateSort",
    "AggregateSortKey",
    "AggregateReducer",
    "AggregateLoad",
    "AggregateCursor",
    "LOAD_ALL",
    "IndexOptions",
    "TagAttribute",
    "TextAttribute",
    "NumericAttribute",
    "GeoAttribute",
    "GeometryAttribute",
    "VectorAttribute",
    "parse_attribute",
    "ReplyFormat",
    "detect_reply_format",
    "decode_search_reply",
    "decode_aggregate_reply",
    "QueryResult",
    "QueryResults",
    "AggregateResults",
    "HashValue",
    "JSONValue",
    "Info",
    "parse_info",
    "SearchIterator",
    "AsyncSearchIterator",
]
