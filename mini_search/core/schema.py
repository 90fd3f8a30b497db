"""Index schema attributes and `FT.CREATE` option serialization.

Each attribute variant knows how to serialize itself into the `SCHEMA` section
of an index definition and how to rebuild itself from the attribute
description the engine reports in `FT.INFO`. The two directions are kept next
to each other so that they stay inverse of one another: an attribute created
with defaults comes back with the same defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from ._coerce import to_float, to_int, to_str
from .arguments import append_flag, append_value, serialize_counted_args
from .errors import ReplyDecodeError, SchemaParseError
from .types import CommandArgs

INDEX_ON_HASH = "HASH"
INDEX_ON_JSON = "JSON"

DEFAULT_TAG_SEPARATOR = ","
DEFAULT_TEXT_WEIGHT = 1.0
DEFAULT_COORD_SYSTEM = "SPHERICAL"
DEFAULT_INDEX_SCORE = 1.0

# Keys of an FT.INFO attribute description that carry a value; any other
# bare token in a flat description is a flag.
_VALUED_KEYS = frozenset(
    {
        "identifier",
        "attribute",
        "type",
        "separator",
        "weight",
        "phonetic",
        "algorithm",
        "data_type",
        "dim",
        "distance_metric",
        "initial_cap",
        "block_size",
        "m",
        "ef_construction",
        "ef_runtime",
        "epsilon",
        "coord_system",
    }
)
_VECTOR_ALGORITHMS = frozenset({"flat", "hnsw"})


def _head(name: str, alias: Optional[str], type_token: str) -> CommandArgs:
    args: CommandArgs = [name]
    append_value(args, "AS", alias)
    args.append(type_token)
    return args


def _append_sortable(args: CommandArgs, sortable: bool, unnormalized: bool) -> None:
    if unnormalized and not sortable:
        raise ValueError("unnormalized (UNF) requires sortable=True")
    if sortable:
        args.append("SORTABLE")
        append_flag(args, unnormalized, "UNF")


def _alias_from_info(info: Mapping[str, Any], name: str) -> Optional[str]:
    if "attribute" not in info:
        return None
    alias = to_str(info["attribute"], what="attribute alias")
    return None if alias == name else alias


def _name_from_info(info: Mapping[str, Any]) -> str:
    if "identifier" not in info:
        raise ReplyDecodeError("Attribute description has no identifier.")
    return to_str(info["identifier"], what="attribute identifier")


@dataclass
class TagAttribute:
    """A `TAG` attribute: exact-match values split on a separator."""

    name: str
    alias: Optional[str] = None
    separator: Optional[str] = None
    case_sensitive: bool = False
    with_suffix_trie: bool = False
    sortable: bool = False
    unnormalized: bool = False
    no_index: bool = False

    def serialize(self) -> CommandArgs:
        args = _head(self.name, self.alias, "TAG")
        append_value(args, "SEPARATOR", self.separator)
        append_flag(args, self.case_sensitive, "CASESENSITIVE")
        append_flag(args, self.with_suffix_trie, "WITHSUFFIXTRIE")
        _append_sortable(args, self.sortable, self.unnormalized)
        append_flag(args, self.no_index, "NOINDEX")
        return args

    @classmethod
    def from_info(cls, info: Mapping[str, Any]) -> TagAttribute:
        name = _name_from_info(info)
        separator = info.get("separator")
        separator = None if separator is None else to_str(separator, what="separator")
        return cls(
            name=name,
            alias=_alias_from_info(info, name),
            separator=None if separator == DEFAULT_TAG_SEPARATOR else separator,
            case_sensitive=bool(info.get("casesensitive")),
            with_suffix_trie=bool(info.get("withsuffixtrie")),
            sortable=bool(info.get("sortable")),
            unnormalized=bool(info.get("unf")),
            no_index=bool(info.get("noindex")),
        )


@dataclass
class TextAttribute:
    """A full-text `TEXT` attribute."""

    name: str
    alias: Optional[str] = None
    no_stem: bool = False
    weight: Optional[float] = None
    phonetic: Optional[str] = None
    with_suffix_trie: bool = False
    sortable: bool = False
    unnormalized: bool = False
    no_index: bool = False

    def serialize(self) -> CommandArgs:
        args = _head(self.name, self.alias, "TEXT")
        append_flag(args, self.no_stem, "NOSTEM")
        append_value(args, "WEIGHT", self.weight)
        append_value(args, "PHONETIC", self.phonetic)
        append_flag(args, self.with_suffix_trie, "WITHSUFFIXTRIE")
        _append_sortable(args, self.sortable, self.unnormalized)
        append_flag(args, self.no_index, "NOINDEX")
        return args

    @classmethod
    def from_info(cls, info: Mapping[str, Any]) -> TextAttribute:
        name = _name_from_info(info)
        weight = info.get("weight")
        weight = None if weight is None else to_float(weight, what="weight")
        phonetic = info.get("phonetic")
        return cls(
            name=name,
            alias=_alias_from_info(info, name),
            no_stem=bool(info.get("nostem")),
            weight=None if weight == DEFAULT_TEXT_WEIGHT else weight,
            phonetic=None if phonetic is None else to_str(phonetic, what="phonetic"),
            with_suffix_trie=bool(info.get("withsuffixtrie")),
            sortable=bool(info.get("sortable")),
            unnormalized=bool(info.get("unf")),
            no_index=bool(info.get("noindex")),
        )


@dataclass
class NumericAttribute:
    """A `NUMERIC` attribute usable in range filters."""

    name: str
    alias: Optional[str] = None
    sortable: bool = False
    no_index: bool = False

    def serialize(self) -> CommandArgs:
        args = _head(self.name, self.alias, "NUMERIC")
        append_flag(args, self.sortable, "SORTABLE")
        append_flag(args, self.no_index, "NOINDEX")
        return args

    @classmethod
    def from_info(cls, info: Mapping[str, Any]) -> NumericAttribute:
        name = _name_from_info(info)
        return cls(
            name=name,
            alias=_alias_from_info(info, name),
            sortable=bool(info.get("sortable")),
            no_index=bool(info.get("noindex")),
        )


@dataclass
class GeoAttribute:
    """A `GEO` attribute holding `longitude,latitude` points."""

    name: str
    alias: Optional[str] = None
    sortable: bool = False
    no_index: bool = False

    def serialize(self) -> CommandArgs:
        args = _head(self.name, self.alias, "GEO")
        append_flag(args, self.sortable, "SORTABLE")
        append_flag(args, self.no_index, "NOINDEX")
        return args

    @classmethod
    def from_info(cls, info: Mapping[str, Any]) -> GeoAttribute:
        name = _name_from_info(info)
        return cls(
            name=name,
            alias=_alias_from_info(info, name),
            sortable=bool(info.get("sortable")),
            no_index=bool(info.get("noindex")),
        )


@dataclass
class GeometryAttribute:
    """A `GEOSHAPE` attribute holding WKT polygons or points."""

    name: str
    alias: Optional[str] = None
    coord_system: Optional[str] = None
    no_index: bool = False

    def serialize(self) -> CommandArgs:
        args = _head(self.name, self.alias, "GEOSHAPE")
        if self.coord_system is not None:
            args.append(self.coord_system.upper())
        append_flag(args, self.no_index, "NOINDEX")
        return args

    @classmethod
    def from_info(cls, info: Mapping[str, Any]) -> GeometryAttribute:
        name = _name_from_info(info)
        coord_system = info.get("coord_system")
        if coord_system is not None:
            coord_system = to_str(coord_system, what="coord_system").upper()
        elif info.get("algorithm") == "FLAT":
            coord_system = "FLAT"
        return cls(
            name=name,
            alias=_alias_from_info(info, name),
            coord_system=None if coord_system == DEFAULT_COORD_SYSTEM else coord_system,
            no_index=bool(info.get("noindex")),
        )


@dataclass
class VectorAttribute:
    """A `VECTOR` attribute for similarity search.

    `initial_cap`, `block_size` and the HNSW tuning numbers are only emitted
    when set, leaving the engine defaults in place otherwise.
    """

    name: str
    alias: Optional[str] = None
    algorithm: str = "FLAT"
    data_type: str = "FLOAT32"
    dim: int = 0
    distance_metric: str = "COSINE"
    initial_cap: Optional[int] = None
    block_size: Optional[int] = None
    m: Optional[int] = None
    ef_construction: Optional[int] = None
    ef_runtime: Optional[int] = None
    epsilon: Optional[float] = None

    def serialize(self) -> CommandArgs:
        if self.dim <= 0:
            raise ValueError("Vector attribute dim must be > 0")

        params: CommandArgs = [
            "TYPE",
            self.data_type.upper(),
            "DIM",
            self.dim,
            "DISTANCE_METRIC",
            self.distance_metric.upper(),
        ]
        append_value(params, "INITIAL_CAP", self.initial_cap)
        append_value(params, "BLOCK_SIZE", self.block_size)
        append_value(params, "M", self.m)
        append_value(params, "EF_CONSTRUCTION", self.ef_construction)
        append_value(params, "EF_RUNTIME", self.ef_runtime)
        append_value(params, "EPSILON", self.epsilon)

        args = _head(self.name, self.alias, "VECTOR")
        args.extend((self.algorithm.upper(), len(params)))
        args.extend(params)
        return args

    @classmethod
    def from_info(cls, info: Mapping[str, Any]) -> VectorAttribute:
        name = _name_from_info(info)

        def optional_int(key: str) -> Optional[int]:
            return None if key not in info else to_int(info[key], what=key)

        epsilon = info.get("epsilon")
        return cls(
            name=name,
            alias=_alias_from_info(info, name),
            algorithm=to_str(info.get("algorithm", "FLAT"), what="algorithm").upper(),
            data_type=to_str(info.get("data_type", "FLOAT32"), what="data_type").upper(),
            dim=to_int(info.get("dim", 0), what="dim"),
            distance_metric=to_str(
                info.get("distance_metric", "COSINE"), what="distance_metric"
            ).upper(),
            initial_cap=optional_int("initial_cap"),
            block_size=optional_int("block_size"),
            m=optional_int("m"),
            ef_construction=optional_int("ef_construction"),
            ef_runtime=optional_int("ef_runtime"),
            epsilon=None if epsilon is None else to_float(epsilon, what="epsilon"),
        )


SchemaAttribute = Union[
    TagAttribute,
    TextAttribute,
    NumericAttribute,
    GeoAttribute,
    GeometryAttribute,
    VectorAttribute,
]

_ATTRIBUTE_PARSERS: Dict[str, Callable[[Mapping[str, Any]], SchemaAttribute]] = {
    "tag": TagAttribute.from_info,
    "text": TextAttribute.from_info,
    "numeric": NumericAttribute.from_info,
    "geo": GeoAttribute.from_info,
    "geoshape": GeometryAttribute.from_info,
    "geometry": GeometryAttribute.from_info,
    "vector": VectorAttribute.from_info,
}


def _algorithm_params(raw: Any) -> Dict[str, Any]:
    params = attribute_info_map(raw)
    # Nested vector parameters report the element type under `type`.
    if "type" in params:
        params["data_type"] = params.pop("type")
    return params


def attribute_info_map(raw: Any) -> Dict[str, Any]:
    """Normalize one `FT.INFO` attribute description into a lowercase-keyed dict.

    Legacy replies use a flat list where valued keys are followed by their value
    and flags such as `SORTABLE` stand alone. Modern replies use a map with the
    flags gathered under `flags`. Either way flags come back as `True` entries.
    """

    info: Dict[str, Any] = {}
    if isinstance(raw, Mapping):
        for key, value in raw.items():
            lowered = to_str(key, what="attribute key").lower()
            if lowered == "flags":
                for flag in value or []:
                    info[to_str(flag, what="attribute flag").lower()] = True
            elif lowered in _VECTOR_ALGORITHMS and isinstance(value, (Mapping, list, tuple)):
                info["algorithm"] = lowered.upper()
                info.update(_algorithm_params(value))
            else:
                info[lowered] = value
        return info

    if not isinstance(raw, (list, tuple)):
        raise ReplyDecodeError(
            f"Expected attribute description as list or map, got {type(raw).__name__}"
        )

    position = 0
    while position < len(raw):
        token = raw[position]
        if isinstance(token, (Mapping, list, tuple)):
            info.update(attribute_info_map(token))
            position += 1
            continue
        lowered = to_str(token, what="attribute key").lower()
        following = raw[position + 1] if position + 1 < len(raw) else None
        if lowered in _VECTOR_ALGORITHMS and isinstance(following, (Mapping, list, tuple)):
            info["algorithm"] = lowered.upper()
            info.update(_algorithm_params(following))
            position += 2
        elif lowered in _VECTOR_ALGORITHMS and "algorithm" not in info:
            info["algorithm"] = lowered.upper()
            position += 1
        elif lowered in _VECTOR_ALGORITHMS:
            position += 1
        elif lowered in _VALUED_KEYS and position + 1 < len(raw):
            info[lowered] = following
            position += 2
        else:
            info[lowered] = True
            position += 1
    return info


def parse_attribute(raw: Any) -> SchemaAttribute:
    """Rebuild one schema attribute from its `FT.INFO` description.

    Raises:
        SchemaParseError: If the reported attribute type is not known.
    """

    info = attribute_info_map(raw)
    if "type" not in info:
        raise ReplyDecodeError("Attribute description has no type.")
    attribute_type = to_str(info["type"], what="attribute type")
    parser = _ATTRIBUTE_PARSERS.get(attribute_type.lower())
    if parser is None:
        raise SchemaParseError(attribute_type)
    return parser(info)


@dataclass
class IndexOptions:
    """Options for `FT.CREATE`.

    Attributes:
        on: Key type to index, `HASH` or `JSON`.
        prefix: Key prefixes the index follows.
        stop_words: `None` keeps the engine stop-word list, an empty list
            disables stop words (`STOPWORDS 0`).
        temporary: Idle seconds before a temporary index expires.
        schema: Attribute definitions, in index order.
    """

    on: str = INDEX_ON_HASH
    prefix: List[str] = field(default_factory=list)
    filter: Optional[str] = None
    language: Optional[str] = None
    language_field: Optional[str] = None
    score: float = DEFAULT_INDEX_SCORE
    score_field: Optional[str] = None
    max_text_fields: bool = False
    no_offsets: bool = False
    temporary: Optional[int] = None
    no_highlight: bool = False
    no_fields: bool = False
    no_freqs: bool = False
    stop_words: Optional[List[str]] = None
    skip_initial_scan: bool = False
    schema: List[SchemaAttribute] = field(default_factory=list)

    def serialize(self) -> CommandArgs:
        """Serialize the options that follow the index name in `FT.CREATE`."""

        on = self.on.upper()
        if on not in (INDEX_ON_HASH, INDEX_ON_JSON):
            raise ValueError(f"Unsupported index key type: {self.on!r}")
        if not self.schema:
            raise ValueError("Index schema must contain at least one attribute.")

        args: CommandArgs = ["ON", on]
        args.extend(serialize_counted_args("PREFIX", self.prefix))
        append_value(args, "FILTER", self.filter)
        append_value(args, "LANGUAGE", self.language)
        append_value(args, "LANGUAGE_FIELD", self.language_field)
        args.extend(("SCORE", format(self.score, "g")))
        append_value(args, "SCORE_FIELD", self.score_field)
        append_flag(args, self.max_text_fields, "MAXTEXTFIELDS")
        append_flag(args, self.no_offsets, "NOOFFSETS")
        if self.temporary is not None and self.temporary > 0:
            args.extend(("TEMPORARY", self.temporary))
        # NOOFFSETS already implies NOHL.
        append_flag(args, self.no_highlight and not self.no_offsets, "NOHL")
        append_flag(args, self.no_fields, "NOFIELDS")
        append_flag(args, self.no_freqs, "NOFREQS")
        if self.stop_words is not None:
            args.extend(serialize_counted_args("STOPWORDS", self.stop_words, include_zero=True))
        append_flag(args, self.skip_initial_scan, "SKIPINITIALSCAN")

        args.append("SCHEMA")
        for attribute in self.schema:
            args.extend(attribute.serialize())
        return args
