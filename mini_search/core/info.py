"""Read-only index snapshot decoded from `FT.INFO`."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List

from ._coerce import as_map, to_float, to_int, to_str
from .errors import ReplyDecodeError
from .schema import INDEX_ON_HASH, INDEX_ON_JSON, IndexOptions, parse_attribute


@dataclass(frozen=True)
class GCStats:
    bytes_collected: int = 0
    total_ms_run: timedelta = timedelta(0)
    total_cycles: int = 0
    average_cycle_time: timedelta = timedelta(0)
    last_run_time: timedelta = timedelta(0)
    gc_numeric_trees_missed: int = 0
    gc_blocks_denied: int = 0


@dataclass(frozen=True)
class CursorStats:
    global_idle: int = 0
    global_total: int = 0
    index_capacity: int = 0
    index_total: int = 0


@dataclass(frozen=True)
class DialectStats:
    dialect_1: int = 0
    dialect_2: int = 0
    dialect_3: int = 0
    dialect_4: int = 0


@dataclass(frozen=True)
class Info:
    """Snapshot of one index as reported by `FT.INFO`.

    Built fresh by `parse_info` on every call and never mutated afterwards.
    `index` is the index definition rebuilt from the reported metadata.
    """

    index_name: str
    index: IndexOptions = field(default_factory=IndexOptions)
    num_docs: int = 0
    max_doc_id: int = 0
    num_terms: int = 0
    num_records: int = 0
    indexing: float = 0.0
    percent_indexed: float = 0.0
    hash_indexing_failures: int = 0
    total_inverted_index_blocks: int = 0
    inverted_size_mb: float = 0.0
    vector_index_size_mb: float = 0.0
    doc_table_size_mb: float = 0.0
    offset_vectors_size_mb: float = 0.0
    sortable_values_size_mb: float = 0.0
    key_table_size_mb: float = 0.0
    records_per_doc_avg: float = 0.0
    bytes_per_record_avg: float = 0.0
    offsets_per_term_avg: float = 0.0
    offset_bits_per_record_avg: float = 0.0
    total_indexing_time: timedelta = timedelta(0)
    number_of_uses: int = 0
    gc_stats: GCStats = field(default_factory=GCStats)
    cursor_stats: CursorStats = field(default_factory=CursorStats)
    dialect_stats: DialectStats = field(default_factory=DialectStats)


def _int(data: Mapping[str, Any], key: str) -> int:
    return to_int(data[key], what=key) if key in data else 0


def _float(data: Mapping[str, Any], key: str) -> float:
    return to_float(data[key], what=key) if key in data else 0.0


def _milliseconds(data: Mapping[str, Any], key: str) -> timedelta:
    value = _float(data, key)
    # Averages are reported as nan until the first cycle has run.
    return timedelta(0) if math.isnan(value) else timedelta(milliseconds=value)


def _section(data: Mapping[str, Any], key: str) -> Dict[str, Any]:
    raw = data.get(key)
    if raw is None:
        return {}
    return as_map(raw, what=key)


def _strings(raw: Any, *, what: str) -> List[str]:
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise ReplyDecodeError(f"Expected {what} as a list, got {type(raw).__name__}")
    return [to_str(item, what=what) for item in raw]


def _parse_index_options(data: Mapping[str, Any]) -> IndexOptions:
    options = IndexOptions()

    definition = _section(data, "index_definition")
    key_type = to_str(definition.get("key_type", INDEX_ON_HASH), what="key_type").upper()
    options.on = INDEX_ON_JSON if key_type == INDEX_ON_JSON else INDEX_ON_HASH
    options.prefix = _strings(definition.get("prefixes"), what="prefixes")
    if "default_score" in definition:
        options.score = to_float(definition["default_score"], what="default_score")
    if definition.get("filter") is not None:
        options.filter = to_str(definition["filter"], what="filter")
    if definition.get("default_language") is not None:
        language = to_str(definition["default_language"], what="default_language")
        options.language = None if language.lower() == "english" else language
    if definition.get("language_field") is not None:
        options.language_field = to_str(definition["language_field"], what="language_field")
    if definition.get("score_field") is not None:
        options.score_field = to_str(definition["score_field"], what="score_field")

    flags = {flag.upper() for flag in _strings(data.get("index_options"), what="index option")}
    options.max_text_fields = "MAXTEXTFIELDS" in flags
    options.no_offsets = "NOOFFSETS" in flags
    options.no_highlight = "NOHL" in flags and not options.no_offsets
    options.no_fields = "NOFIELDS" in flags
    options.no_freqs = "NOFREQS" in flags
    options.skip_initial_scan = "SKIPINITIALSCAN" in flags

    if "stopwords_list" in data:
        options.stop_words = _strings(data["stopwords_list"], what="stop word")

    attributes = data.get("attributes") or []
    if not isinstance(attributes, (list, tuple)):
        raise ReplyDecodeError("FT.INFO 'attributes' entry is not a list.")
    options.schema = [parse_attribute(raw) for raw in attributes]
    return options


def parse_info(reply: Any) -> Info:
    """Build an `Info` snapshot from an `FT.INFO` reply in either encoding.

    Absent counters read as zero; counters that are present but not numeric
    raise `ReplyDecodeError`. Unknown attribute types raise
    `SchemaParseError`.
    """

    data = as_map(reply, what="FT.INFO reply")
    if "index_name" not in data:
        raise ReplyDecodeError("FT.INFO reply has no 'index_name' entry.")

    gc = _section(data, "gc_stats")
    cursors = _section(data, "cursor_stats")
    dialects = _section(data, "dialect_stats")

    return Info(
        index_name=to_str(data["index_name"], what="index_name"),
        index=_parse_index_options(data),
        num_docs=_int(data, "num_docs"),
        max_doc_id=_int(data, "max_doc_id"),
        num_terms=_int(data, "num_terms"),
        num_records=_int(data, "num_records"),
        indexing=_float(data, "indexing"),
        percent_indexed=_float(data, "percent_indexed"),
        hash_indexing_failures=_int(data, "hash_indexing_failures"),
        total_inverted_index_blocks=_int(data, "total_inverted_index_blocks"),
        inverted_size_mb=_float(data, "inverted_sz_mb"),
        vector_index_size_mb=_float(data, "vector_index_sz_mb"),
        doc_table_size_mb=_float(data, "doc_table_size_mb"),
        offset_vectors_size_mb=_float(data, "offset_vectors_sz_mb"),
        sortable_values_size_mb=_float(data, "sortable_values_size_mb"),
        key_table_size_mb=_float(data, "key_table_size_mb"),
        records_per_doc_avg=_float(data, "records_per_doc_avg"),
        bytes_per_record_avg=_float(data, "bytes_per_record_avg"),
        offsets_per_term_avg=_float(data, "offsets_per_term_avg"),
        offset_bits_per_record_avg=_float(data, "offset_bits_per_record_avg"),
        total_indexing_time=timedelta(seconds=_float(data, "total_indexing_time")),
        number_of_uses=_int(data, "number_of_uses"),
        gc_stats=GCStats(
            bytes_collected=_int(gc, "bytes_collected"),
            total_ms_run=_milliseconds(gc, "total_ms_run"),
            total_cycles=_int(gc, "total_cycles"),
            average_cycle_time=_milliseconds(gc, "average_cycle_time_ms"),
            last_run_time=_milliseconds(gc, "last_run_time_ms"),
            gc_numeric_trees_missed=_int(gc, "gc_numeric_trees_missed"),
            gc_blocks_denied=_int(gc, "gc_blocks_denied"),
        ),
        cursor_stats=CursorStats(
            global_idle=_int(cursors, "global_idle"),
            global_total=_int(cursors, "global_total"),
            index_capacity=_int(cursors, "index_capacity"),
            index_total=_int(cursors, "index_total"),
        ),
        dialect_stats=DialectStats(
            dialect_1=_int(dialects, "dialect_1"),
            dialect_2=_int(dialects, "dialect_2"),
            dialect_3=_int(dialects, "dialect_3"),
            dialect_4=_int(dialects, "dialect_4"),
        ),
    )
