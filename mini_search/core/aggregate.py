"""Aggregation pipeline options and their `FT.AGGREGATE` serialization.

The pipeline is an ordered program: steps are serialized one after another in
exactly the order they were supplied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence, Union

from .arguments import append_flag, append_value, milliseconds, serialize_params
from .query import DEFAULT_DIALECT, SORT_ASC, Limit
from .types import CommandArgs


@dataclass(frozen=True)
class AggregateLoad:
    """One `LOAD` field with an optional alias."""

    name: str
    alias: Optional[str] = None

    def serialize(self) -> CommandArgs:
        if self.alias:
            return [self.name, "AS", self.alias]
        return [self.name]


LOAD_ALL = AggregateLoad("*")


@dataclass
class AggregateCursor:
    """`WITHCURSOR` directive; zero or `None` values are left to the engine."""

    count: Optional[int] = None
    max_idle: timedelta | int | None = None

    def serialize(self) -> CommandArgs:
        args: CommandArgs = ["WITHCURSOR"]
        append_value(args, "COUNT", self.count, default=0)
        append_value(args, "MAXIDLE", milliseconds(self.max_idle), default=0)
        return args


@dataclass
class AggregateReducer:
    """One `REDUCE` clause inside a `GROUPBY` step."""

    name: str
    args: List[Any] = field(default_factory=list)
    alias: Optional[str] = None

    def serialize(self) -> CommandArgs:
        args: CommandArgs = ["REDUCE", self.name, len(self.args), *self.args]
        append_value(args, "AS", self.alias or None)
        return args


@dataclass
class AggregateFilter:
    expression: str

    def serialize_step(self) -> CommandArgs:
        return ["FILTER", self.expression]


@dataclass
class AggregateGroupBy:
    properties: List[str] = field(default_factory=list)
    reducers: List[AggregateReducer] = field(default_factory=list)

    def serialize_step(self) -> CommandArgs:
        args: CommandArgs = ["GROUPBY", len(self.properties), *self.properties]
        for reducer in self.reducers:
            args.extend(reducer.serialize())
        return args


@dataclass
class AggregateApply:
    expression: str
    alias: str

    def serialize_step(self) -> CommandArgs:
        args: CommandArgs = ["APPLY", self.expression]
        append_value(args, "AS", self.alias or None)
        return args


@dataclass(frozen=True)
class AggregateSortKey:
    name: str
    order: str = SORT_ASC

    def serialize(self) -> CommandArgs:
        name = self.name if self.name.startswith("@") else f"@{self.name}"
        return [name, (self.order or SORT_ASC).upper()]


@dataclass
class AggregateSort:
    """`SORTBY` step; the count is the number of tokens that follow it."""

    keys: List[AggregateSortKey] = field(default_factory=list)
    max: Optional[int] = None

    def serialize_step(self) -> CommandArgs:
        if not self.keys:
            return []
        tokens: CommandArgs = []
        for key in self.keys:
            tokens.extend(key.serialize())
        args: CommandArgs = ["SORTBY", len(tokens), *tokens]
        append_value(args, "MAX", self.max, default=0)
        return args


AggregateStep = Union[AggregateFilter, AggregateGroupBy, AggregateApply, AggregateSort, Limit]


_STEP_TYPES = (AggregateFilter, AggregateGroupBy, AggregateApply, AggregateSort, Limit)


def _serialize_step(step: AggregateStep) -> CommandArgs:
    if not isinstance(step, _STEP_TYPES):
        raise TypeError(f"Unsupported aggregate step: {type(step).__name__}")
    return step.serialize_step()


@dataclass
class AggregateOptions:
    """Options for `FT.AGGREGATE`.

    Attributes:
        load: Fields to load; `[LOAD_ALL]` loads every field (`LOAD *`).
        cursor: Cursor directive, or `None` to return every row at once.
        steps: Pipeline steps, serialized in list order.
    """

    verbatim: bool = False
    load: List[AggregateLoad] = field(default_factory=list)
    timeout: timedelta | int | None = None
    cursor: Optional[AggregateCursor] = None
    params: Dict[str, Any] = field(default_factory=dict)
    dialect: int = DEFAULT_DIALECT
    steps: List[AggregateStep] = field(default_factory=list)

    def serialize(self) -> CommandArgs:
        args: CommandArgs = []
        append_flag(args, self.verbatim, "VERBATIM")
        append_value(args, "TIMEOUT", milliseconds(self.timeout), default=0)
        args.extend(self._serialize_load())

        for step in self.steps:
            args.extend(_serialize_step(step))

        if self.cursor is not None:
            args.extend(self.cursor.serialize())

        args.extend(serialize_params(self.params))
        append_value(args, "DIALECT", self.dialect, default=DEFAULT_DIALECT)
        return args

    def _serialize_load(self) -> CommandArgs:
        if not self.load:
            return []
        if any(item.name == LOAD_ALL.name for item in self.load):
            if len(self.load) > 1:
                raise ValueError("LOAD_ALL cannot be combined with named loads.")
            return ["LOAD", "*"]
        tokens: CommandArgs = []
        for item in self.load:
            tokens.extend(item.serialize())
        return ["LOAD", len(tokens), *tokens]


def reduce_count(alias: Optional[str] = None) -> AggregateReducer:
    return AggregateReducer("COUNT", [], alias)


def reduce_count_distinct(prop: str, alias: Optional[str] = None) -> AggregateReducer:
    return AggregateReducer("COUNT_DISTINCT", [prop], alias)


def reduce_count_distinctish(prop: str, alias: Optional[str] = None) -> AggregateReducer:
    return AggregateReducer("COUNT_DISTINCTISH", [prop], alias)


def reduce_sum(prop: str, alias: Optional[str] = None) -> AggregateReducer:
    return AggregateReducer("SUM", [prop], alias)


def reduce_min(prop: str, alias: Optional[str] = None) -> AggregateReducer:
    return AggregateReducer("MIN", [prop], alias)


def reduce_max(prop: str, alias: Optional[str] = None) -> AggregateReducer:
    return AggregateReducer("MAX", [prop], alias)


def reduce_avg(prop: str, alias: Optional[str] = None) -> AggregateReducer:
    return AggregateReducer("AVG", [prop], alias)


def reduce_stddev(prop: str, alias: Optional[str] = None) -> AggregateReducer:
    return AggregateReducer("STDDEV", [prop], alias)


def reduce_quantile(
    prop: str, quantile: float, alias: Optional[str] = None
) -> AggregateReducer:
    if not 0 <= quantile <= 1:
        raise ValueError("quantile must be between 0 and 1")
    return AggregateReducer("QUANTILE", [prop, quantile], alias)


def reduce_to_list(prop: str, alias: Optional[str] = None) -> AggregateReducer:
    return AggregateReducer("TOLIST", [prop], alias)


def reduce_first_value(
    prop: str, order: Optional[str] = None, alias: Optional[str] = None
) -> AggregateReducer:
    args: List[Any] = [prop]
    if order:
        args.append(order.upper())
    return AggregateReducer("FIRST_VALUE", args, alias)


def reduce_first_value_by(
    prop: str, by: str, order: Optional[str] = None, alias: Optional[str] = None
) -> AggregateReducer:
    """Return the first `prop` value when rows are ordered by another property."""

    args: List[Any] = [prop, "BY", by]
    if order:
        args.append(order.upper())
    return AggregateReducer("FIRST_VALUE", args, alias)


def reduce_random_sample(
    prop: str, sample_size: int, alias: Optional[str] = None
) -> AggregateReducer:
    if sample_size <= 0:
        raise ValueError("sample_size must be > 0")
    return AggregateReducer("RANDOM_SAMPLE", [prop, sample_size], alias)


class GroupByBuilder:
    """Fluent builder for one `AggregateGroupBy` step."""

    def __init__(self) -> None:
        self._group = AggregateGroupBy()

    def group_by(self) -> AggregateGroupBy:
        return self._group

    def property(self, name: str) -> GroupByBuilder:
        self._group.properties.append(name)
        return self

    def properties(self, names: Sequence[str]) -> GroupByBuilder:
        self._group.properties.extend(names)
        return self

    def reduce(self, reducer: AggregateReducer) -> GroupByBuilder:
        self._group.reducers.append(reducer)
        return self


class AggregateBuilder:
    """Fluent builder for `AggregateOptions`.

    Pipeline methods (`filter`, `apply`, `group_by`, `sort_by`, `limit`)
    append a step, so the call order is the pipeline order.
    """

    def __init__(self) -> None:
        self._options = AggregateOptions()

    def options(self) -> AggregateOptions:
        return self._options

    def dialect(self, version: int) -> AggregateBuilder:
        self._options.dialect = version
        return self

    def timeout(self, timeout: timedelta | int) -> AggregateBuilder:
        self._options.timeout = timeout
        return self

    def param(self, name: str, value: Any) -> AggregateBuilder:
        self._options.params[name] = value
        return self

    def params(self, params: Dict[str, Any]) -> AggregateBuilder:
        self._options.params.update(params)
        return self

    def verbatim(self) -> AggregateBuilder:
        self._options.verbatim = True
        return self

    def load(self, name: str, alias: Optional[str] = None) -> AggregateBuilder:
        self._options.load.append(AggregateLoad(name, alias))
        return self

    def load_all(self) -> AggregateBuilder:
        self._options.load = [LOAD_ALL]
        return self

    def cursor(
        self, count: Optional[int] = None, max_idle: timedelta | int | None = None
    ) -> AggregateBuilder:
        self._options.cursor = AggregateCursor(count, max_idle)
        return self

    def limit(self, offset: int, num: int) -> AggregateBuilder:
        self._options.steps.append(Limit(offset, num))
        return self

    def filter(self, expression: str) -> AggregateBuilder:
        self._options.steps.append(AggregateFilter(expression))
        return self

    def apply(self, expression: str, alias: str) -> AggregateBuilder:
        self._options.steps.append(AggregateApply(expression, alias))
        return self

    def group_by(self, group: AggregateGroupBy | GroupByBuilder) -> AggregateBuilder:
        if isinstance(group, GroupByBuilder):
            group = group.group_by()
        self._options.steps.append(group)
        return self

    def sort_by(
        self, keys: Sequence[AggregateSortKey], max: Optional[int] = None
    ) -> AggregateBuilder:
        self._options.steps.append(AggregateSort(list(keys), max))
        return self
