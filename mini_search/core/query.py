"""Search query options and their `FT.SEARCH` serialization.

`QueryOptions` holds every recognized search parameter. Its `serialize()`
method produces the tokens that follow `<index> <query>` on the wire and its
`result_size()` method tells the legacy reply decoder how many tokens one
matched record occupies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence

from .arguments import (
    append_flag,
    append_value,
    filter_value,
    milliseconds,
    serialize_counted_args,
    serialize_params,
)
from .types import CommandArgs

DEFAULT_OFFSET = 0
DEFAULT_LIMIT = 10
DEFAULT_DIALECT = 2

DEFAULT_SUMMARIZE_FRAGS = 3
DEFAULT_SUMMARIZE_LEN = 20
DEFAULT_SUMMARIZE_SEPARATOR = "..."

SORT_ASC = "ASC"
SORT_DESC = "DESC"

GEO_METRES = "m"
GEO_KILOMETRES = "km"
GEO_MILES = "mi"
GEO_FEET = "ft"


@dataclass
class Limit:
    """Result window as `offset` plus the number of records to return."""

    offset: int = DEFAULT_OFFSET
    num: int = DEFAULT_LIMIT

    def is_default(self) -> bool:
        return self.offset == DEFAULT_OFFSET and self.num == DEFAULT_LIMIT

    def serialize(self) -> CommandArgs:
        """Serialize as a search option; the engine default window is omitted."""

        if self.is_default():
            return []
        return self.serialize_step()

    def serialize_step(self) -> CommandArgs:
        """Serialize as an aggregate pipeline step, which is always explicit."""

        return ["LIMIT", self.offset, self.num]


def _bound(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return filter_value(value)
    return value


@dataclass
class QueryFilter:
    """Numeric range filter on one attribute.

    `min` and `max` are either numbers or already formatted bounds such as
    `"(10.000000"` or `"+inf"`.
    """

    attribute: str
    min: Any = "-inf"
    max: Any = "+inf"

    @classmethod
    def between(
        cls,
        attribute: str,
        minimum: float,
        maximum: float,
        *,
        exclude_min: bool = False,
        exclude_max: bool = False,
    ) -> QueryFilter:
        """Build a filter with formatted bounds and optional exclusivity."""

        return cls(
            attribute,
            filter_value(minimum, exclude_min),
            filter_value(maximum, exclude_max),
        )

    @classmethod
    def unbounded(cls, attribute: str) -> QueryFilter:
        """Build a filter that matches any value: `-inf .. +inf`."""

        return cls(attribute, filter_value(float("-inf")), filter_value(float("inf")))

    def serialize(self) -> CommandArgs:
        return ["FILTER", self.attribute, _bound(self.min), _bound(self.max)]


@dataclass
class GeoFilter:
    """Radius filter around a longitude/latitude point."""

    attribute: str
    longitude: float
    latitude: float
    radius: float
    units: str = GEO_KILOMETRES

    def serialize(self) -> CommandArgs:
        return [
            "GEOFILTER",
            self.attribute,
            self.longitude,
            self.latitude,
            self.radius,
            self.units,
        ]


@dataclass
class QueryReturn:
    """One projected field with an optional alias."""

    name: str
    alias: Optional[str] = None

    def serialize(self) -> CommandArgs:
        if self.alias:
            return [self.name, "AS", self.alias]
        return [self.name]


@dataclass
class QuerySummarize:
    """`SUMMARIZE` settings; unset numbers keep the engine defaults."""

    fields: List[str] = field(default_factory=list)
    frags: Optional[int] = None
    length: Optional[int] = None
    separator: Optional[str] = None

    @classmethod
    def defaults(cls, fields: Optional[Sequence[str]] = None) -> QuerySummarize:
        return cls(
            fields=list(fields or []),
            frags=DEFAULT_SUMMARIZE_FRAGS,
            length=DEFAULT_SUMMARIZE_LEN,
            separator=DEFAULT_SUMMARIZE_SEPARATOR,
        )

    def serialize(self) -> CommandArgs:
        args: CommandArgs = ["SUMMARIZE"]
        args.extend(serialize_counted_args("FIELDS", self.fields))
        append_value(args, "FRAGS", self.frags)
        append_value(args, "LEN", self.length)
        append_value(args, "SEPARATOR", self.separator)
        return args


@dataclass
class QueryHighlight:
    """`HIGHLIGHT` settings with optional open and close tags."""

    fields: List[str] = field(default_factory=list)
    open_tag: str = ""
    close_tag: str = ""

    def serialize(self) -> CommandArgs:
        args: CommandArgs = ["HIGHLIGHT"]
        args.extend(serialize_counted_args("FIELDS", self.fields))
        if self.open_tag or self.close_tag:
            args.extend(("TAGS", self.open_tag, self.close_tag))
        return args


@dataclass
class QueryOptions:
    """Options for `FT.SEARCH`.

    The instance is owned by the caller. A search iterator built from it
    advances `limit.offset` in place while it walks the result pages.

    Attributes:
        no_content: Return keys only, without field values.
        with_scores: Return the relevance score of each record.
        explain_score: Return a score explanation; ignored unless
            `with_scores` is also set.
        limit: Result window. `None` and `Limit(0, 10)` both leave the
            engine default in place.
        slop: Allowed number of unmatched terms between phrase terms, or
            `None` to leave the engine default.
        timeout: Engine-side timeout as `timedelta` or milliseconds.
        params: Named query parameters referenced as `$name` in the query.
    """

    no_content: bool = False
    verbatim: bool = False
    no_stop_words: bool = False
    with_scores: bool = False
    with_payloads: bool = False
    with_sort_keys: bool = False
    in_order: bool = False
    explain_score: bool = False
    limit: Optional[Limit] = field(default_factory=Limit)
    return_fields: List[QueryReturn] = field(default_factory=list)
    filters: List[QueryFilter] = field(default_factory=list)
    geo_filters: List[GeoFilter] = field(default_factory=list)
    in_keys: List[str] = field(default_factory=list)
    in_fields: List[str] = field(default_factory=list)
    language: Optional[str] = None
    slop: Optional[int] = None
    expander: Optional[str] = None
    scorer: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: str = SORT_ASC
    dialect: int = DEFAULT_DIALECT
    timeout: timedelta | int | None = None
    summarize: Optional[QuerySummarize] = None
    highlight: Optional[QueryHighlight] = None
    params: Dict[str, Any] = field(default_factory=dict)

    def serialize(self) -> CommandArgs:
        """Serialize the options into `FT.SEARCH` tokens, in grammar order."""

        args: CommandArgs = []
        append_flag(args, self.no_content, "NOCONTENT")
        append_flag(args, self.verbatim, "VERBATIM")
        append_flag(args, self.no_stop_words, "NOSTOPWORDS")
        append_flag(args, self.with_scores, "WITHSCORES")
        append_flag(args, self.with_payloads, "WITHPAYLOADS")
        append_flag(args, self.with_sort_keys, "WITHSORTKEYS")

        for query_filter in self.filters:
            args.extend(query_filter.serialize())
        for geo_filter in self.geo_filters:
            args.extend(geo_filter.serialize())

        returned: CommandArgs = []
        for item in self.return_fields:
            returned.extend(item.serialize())
        args.extend(serialize_counted_args("RETURN", returned))

        if self.summarize is not None:
            args.extend(self.summarize.serialize())
        if self.highlight is not None:
            args.extend(self.highlight.serialize())

        append_value(args, "SLOP", self.slop)
        append_value(args, "TIMEOUT", milliseconds(self.timeout), default=0)
        append_flag(args, self.in_order, "INORDER")
        append_value(args, "LANGUAGE", self.language or None)
        append_value(args, "EXPANDER", self.expander or None)
        append_value(args, "SCORER", self.scorer or None)
        args.extend(serialize_counted_args("INKEYS", self.in_keys))
        args.extend(serialize_counted_args("INFIELDS", self.in_fields))

        # Explanations are only produced alongside scores.
        append_flag(args, self.explain_score and self.with_scores, "EXPLAINSCORE")

        if self.sort_by:
            args.extend(("SORTBY", self.sort_by))
            if self.sort_order:
                args.append(self.sort_order.upper())

        if self.limit is not None:
            args.extend(self.limit.serialize())

        args.extend(serialize_params(self.params))
        append_value(args, "DIALECT", self.dialect, default=DEFAULT_DIALECT)
        return args

    def result_size(self) -> int:
        """Return how many legacy reply tokens one matched record occupies."""

        return 2 + int(self.with_scores) - int(self.no_content)

    def explains_scores(self) -> bool:
        return self.with_scores and self.explain_score


class QueryBuilder:
    """Fluent builder for `QueryOptions`.

    Example:
        >>> options = QueryBuilder().no_content().limit(0, 50).options()
    """

    def __init__(self) -> None:
        self._options = QueryOptions()

    def options(self) -> QueryOptions:
        return self._options

    def limit(self, offset: int, num: int) -> QueryBuilder:
        self._options.limit = Limit(offset, num)
        return self

    def dialect(self, version: int) -> QueryBuilder:
        self._options.dialect = version
        return self

    def timeout(self, timeout: timedelta | int) -> QueryBuilder:
        self._options.timeout = timeout
        return self

    def return_field(self, name: str, alias: Optional[str] = None) -> QueryBuilder:
        self._options.return_fields.append(QueryReturn(name, alias))
        return self

    def filter(self, attribute: str, minimum: Any, maximum: Any) -> QueryBuilder:
        self._options.filters.append(QueryFilter(attribute, minimum, maximum))
        return self

    def geo_filter(
        self,
        attribute: str,
        longitude: float,
        latitude: float,
        radius: float,
        units: str = GEO_KILOMETRES,
    ) -> QueryBuilder:
        self._options.geo_filters.append(
            GeoFilter(attribute, longitude, latitude, radius, units)
        )
        return self

    def in_keys(self, keys: Sequence[str]) -> QueryBuilder:
        self._options.in_keys = list(keys)
        return self

    def in_field(self, name: str) -> QueryBuilder:
        self._options.in_fields.append(name)
        return self

    def summarize(
        self,
        fields: Sequence[str],
        separator: str = DEFAULT_SUMMARIZE_SEPARATOR,
        length: int = DEFAULT_SUMMARIZE_LEN,
        frags: int = DEFAULT_SUMMARIZE_FRAGS,
    ) -> QueryBuilder:
        self._options.summarize = QuerySummarize(list(fields), frags, length, separator)
        return self

    def highlight(
        self, fields: Sequence[str], open_tag: str = "", close_tag: str = ""
    ) -> QueryBuilder:
        self._options.highlight = QueryHighlight(list(fields), open_tag, close_tag)
        return self

    def sort_by(self, name: str) -> QueryBuilder:
        self._options.sort_by = name
        return self

    def ascending(self) -> QueryBuilder:
        self._options.sort_order = SORT_ASC
        return self

    def descending(self) -> QueryBuilder:
        self._options.sort_order = SORT_DESC
        return self

    def no_content(self) -> QueryBuilder:
        self._options.no_content = True
        return self

    def with_scores(self) -> QueryBuilder:
        self._options.with_scores = True
        return self

    def explain_score(self) -> QueryBuilder:
        self._options.explain_score = True
        return self

    def with_payloads(self) -> QueryBuilder:
        self._options.with_payloads = True
        return self

    def verbatim(self) -> QueryBuilder:
        self._options.verbatim = True
        return self

    def no_stop_words(self) -> QueryBuilder:
        self._options.no_stop_words = True
        return self

    def in_order(self) -> QueryBuilder:
        self._options.in_order = True
        return self

    def slop(self, slop: int) -> QueryBuilder:
        self._options.slop = slop
        return self

    def language(self, language: str) -> QueryBuilder:
        self._options.language = language
        return self

    def scorer(self, scorer: str) -> QueryBuilder:
        self._options.scorer = scorer
        return self

    def param(self, name: str, value: Any) -> QueryBuilder:
        self._options.params[name] = value
        return self

    def params(self, params: Dict[str, Any]) -> QueryBuilder:
        self._options.params.update(params)
        return self
