"""Public core API for request serialization, reply decoding, and paging."""

from .aggregate import (
    LOAD_ALL,
    AggregateApply,
    AggregateBuilder,
    AggregateCursor,
    AggregateFilter,
    AggregateGroupBy,
    AggregateLoad,
    AggregateOptions,
    AggregateReducer,
    AggregateSort,
    AggregateSortKey,
    AggregateStep,
    GroupByBuilder,
    reduce_avg,
    reduce_count,
    reduce_count_distinct,
    reduce_count_distinctish,
    reduce_first_value,
    reduce_first_value_by,
    reduce_max,
    reduce_min,
    reduce_quantile,
    reduce_random_sample,
    reduce_stddev,
    reduce_sum,
    reduce_to_list,
)
from .arguments import (
    append_flag,
    append_value,
    filter_value,
    serialize_counted_args,
    serialize_params,
)
from .client import SearchClient, aggregate_args, create_index_args, search_args
from .client_async import AsyncSearchClient
from .contracts import AsyncTransportPort, TransportPort
from .decoder import (
    ReplyFormat,
    decode_aggregate_reply,
    decode_config_reply,
    decode_legacy_aggregate,
    decode_legacy_search,
    decode_modern_aggregate,
    decode_modern_search,
    decode_search_reply,
    decode_synonym_dump,
    detect_reply_format,
)
from .errors import ReplyDecodeError, SchemaParseError, SearchError
from .info import CursorStats, DialectStats, GCStats, Info, parse_info
from .iterator import AsyncSearchIterator, SearchIterator
from .query import (
    GeoFilter,
    Limit,
    QueryBuilder,
    QueryFilter,
    QueryHighlight,
    QueryOptions,
    QueryReturn,
    QuerySummarize,
)
from .results import (
    AggregateResults,
    HashValue,
    JSONValue,
    QueryResult,
    QueryResults,
)
from .schema import (
    GeoAttribute,
    GeometryAttribute,
    IndexOptions,
    NumericAttribute,
    SchemaAttribute,
    TagAttribute,
    TextAttribute,
    VectorAttribute,
    parse_attribute,
)

__all__ = [
    "SearchClient",
    "AsyncSearchClient",
    "TransportPort",
    "AsyncTransportPort",
    "search_args",
    "aggregate_args",
    "create_index_args",
    "SearchError",
    "ReplyDecodeError",
    "SchemaParseError",
    "serialize_counted_args",
    "append_flag",
    "append_value",
    "filter_value",
    "serialize_params",
    "QueryOptions",
    "QueryBuilder",
    "Limit",
    "QueryFilter",
    "GeoFilter",
    "QueryReturn",
    "QuerySummarize",
    "QueryHighlight",
    "AggregateOptions",
    "AggregateBuilder",
    "GroupByBuilder",
    "AggregateStep",
    "AggregateFilter",
    "AggregateGroupBy",
    "AggregateApply",
    "AggregateSort",
    "AggregateSortKey",
    "AggregateReducer",
    "AggregateLoad",
    "AggregateCursor",
    "LOAD_ALL",
    "reduce_count",
    "reduce_count_distinct",
    "reduce_count_distinctish",
    "reduce_sum",
    "reduce_min",
    "reduce_max",
    "reduce_avg",
    "reduce_stddev",
    "reduce_quantile",
    "reduce_to_list",
    "reduce_first_value",
    "reduce_first_value_by",
    "reduce_random_sample",
    "SchemaAttribute",
    "TagAttribute",
    "TextAttribute",
    "NumericAttribute",
    "GeoAttribute",
    "GeometryAttribute",
    "VectorAttribute",
    "IndexOptions",
    "parse_attribute",
    "ReplyFormat",
    "detect_reply_format",
    "decode_search_reply",
    "decode_legacy_search",
    "decode_modern_search",
    "decode_aggregate_reply",
    "decode_legacy_aggregate",
    "decode_modern_aggregate",
    "decode_config_reply",
    "decode_synonym_dump",
    "QueryResult",
    "QueryResults",
    "AggregateResults",
    "HashValue",
    "JSONValue",
    "Info",
    "GCStats",
    "CursorStats",
    "DialectStats",
    "parse_info",
    "SearchIterator",
    "AsyncSearchIterator",
]
