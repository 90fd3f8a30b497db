"""Reply decoders for search, aggregate and administration commands.

The engine answers in one of two encodings: the legacy array reply, where one
record spans a fixed number of positional tokens, and the modern map reply,
where every record is a map with named fields. Each encoding has its own pure
decoding function and a dispatcher picks one from the reply's top-level shape.

Decoding is strict. A record that does not match the expected shape fails the
whole reply; nothing is silently dropped or defaulted.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ._coerce import as_map, pairs_to_map, to_float, to_int, to_native, to_str
from .aggregate import AggregateOptions
from .errors import ReplyDecodeError
from .query import QueryOptions
from .results import (
    AggregateResults,
    HashValue,
    JSONValue,
    QueryResult,
    QueryResults,
    ResultValue,
)
from .types import FieldMap

LEGACY_FORMAT = "STRING"


class ReplyFormat(str, Enum):
    LEGACY = "legacy"
    MODERN = "modern"


def detect_reply_format(reply: Any) -> ReplyFormat:
    """Return the encoding of a raw reply from its top-level shape.

    Raises:
        ReplyDecodeError: If the reply is neither an array nor a map.
    """

    if isinstance(reply, Mapping):
        return ReplyFormat.MODERN
    if isinstance(reply, (list, tuple)):
        return ReplyFormat.LEGACY
    raise ReplyDecodeError(
        f"Expected an array or map reply, got {type(reply).__name__}"
    )


def _field_map(raw: Any, *, what: str) -> FieldMap:
    if isinstance(raw, Mapping):
        items = as_map(raw, what=what)
    elif isinstance(raw, (list, tuple)):
        items = pairs_to_map(raw, what=what)
    else:
        raise ReplyDecodeError(
            f"Expected {what} as a list or map, got {type(raw).__name__}"
        )
    return {name: to_str(value, what=f"value of {name!r}") for name, value in items.items()}


def _content(raw: Any, on_json: bool) -> ResultValue:
    values = _field_map(raw, what="record content")
    return JSONValue(values) if on_json else HashValue(values)


def _score(raw: Any, explain: bool) -> Tuple[float, Any]:
    if not explain:
        return to_float(raw, what="score"), None
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ReplyDecodeError("Expected score slot as a [score, explanation] pair.")
    return to_float(raw[0], what="score"), to_native(raw[1])


def _string_list(raw: Any, *, what: str) -> List[Any]:
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise ReplyDecodeError(f"Expected {what} as a list, got {type(raw).__name__}")
    return [to_native(item) for item in raw]


def _check_count(results: List[QueryResult], total: int) -> None:
    if len(results) > total:
        raise ReplyDecodeError(
            f"Search reply carries {len(results)} records but reports {total} in total."
        )


def decode_legacy_search(
    reply: Any, options: Optional[QueryOptions] = None, *, on_json: bool = False
) -> QueryResults:
    """Decode an array-encoded `FT.SEARCH` reply.

    The first element is the total match count; each record then occupies
    `options.result_size()` tokens: the key, the score when requested and the
    content unless suppressed.
    """

    if not isinstance(reply, (list, tuple)):
        raise ReplyDecodeError(
            f"Expected an array search reply, got {type(reply).__name__}"
        )
    if not reply:
        raise ReplyDecodeError("Search reply is empty; expected a total count.")

    options = options or QueryOptions()
    size = options.result_size()
    explain = options.explains_scores()
    total = to_int(reply[0], what="total_results")

    body = reply[1:]
    if len(body) % size:
        raise ReplyDecodeError(
            f"Search reply has {len(body)} record tokens, not a multiple of {size}."
        )

    results: List[QueryResult] = []
    for start in range(0, len(body), size):
        slot = body[start : start + size]
        record = QueryResult(key=to_str(slot[0], what="record key"))
        position = 1
        if options.with_scores:
            record.score, record.explanation = _score(slot[position], explain)
            position += 1
        if not options.no_content:
            record.values = _content(slot[position], on_json)
        results.append(record)

    _check_count(results, total)
    return QueryResults(total, results, format=LEGACY_FORMAT)


def decode_modern_search(
    reply: Any, options: Optional[QueryOptions] = None, *, on_json: bool = False
) -> QueryResults:
    """Decode a map-encoded `FT.SEARCH` reply."""

    if not isinstance(reply, Mapping):
        raise ReplyDecodeError(f"Expected a map search reply, got {type(reply).__name__}")

    options = options or QueryOptions()
    explain = options.explains_scores()
    data = as_map(reply)
    for required in ("total_results", "results"):
        if required not in data:
            raise ReplyDecodeError(f"Search reply has no {required!r} entry.")
    if not isinstance(data["results"], (list, tuple)):
        raise ReplyDecodeError("Search reply 'results' entry is not a list.")

    results: List[QueryResult] = []
    for raw in data["results"]:
        if not isinstance(raw, Mapping):
            raise ReplyDecodeError(f"Expected a record map, got {type(raw).__name__}")
        entry = as_map(raw, what="record")
        if "id" not in entry:
            raise ReplyDecodeError("Search record has no 'id' entry.")
        record = QueryResult(key=to_str(entry["id"], what="record key"))
        if options.with_scores:
            if "score" not in entry:
                raise ReplyDecodeError(f"Search record {record.key!r} has no score.")
            record.score, record.explanation = _score(entry["score"], explain)
        if not options.no_content:
            if "extra_attributes" not in entry:
                raise ReplyDecodeError(f"Search record {record.key!r} has no content.")
            record.values = _content(entry["extra_attributes"], on_json)
        results.append(record)

    total = to_int(data["total_results"], what="total_results")
    _check_count(results, total)
    format_value = data.get("format")
    return QueryResults(
        total,
        results,
        errors=_string_list(data.get("error"), what="error"),
        warnings=_string_list(data.get("warning"), what="warning"),
        format=None if format_value is None else to_str(format_value, what="format"),
        attributes=_string_list(data.get("attributes"), what="attributes"),
    )


def decode_search_reply(
    reply: Any, options: Optional[QueryOptions] = None, *, on_json: bool = False
) -> QueryResults:
    """Decode an `FT.SEARCH` reply in whichever encoding it arrived."""

    if detect_reply_format(reply) is ReplyFormat.MODERN:
        return decode_modern_search(reply, options, on_json=on_json)
    return decode_legacy_search(reply, options, on_json=on_json)


def _row(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, Mapping):
        row = as_map(raw, what="aggregate row")
        if "extra_attributes" in row:
            row = as_map(row["extra_attributes"], what="aggregate row")
    else:
        row = pairs_to_map(raw, what="aggregate row")
    return {name: to_native(value) for name, value in row.items()}


def decode_legacy_aggregate(reply: Any) -> AggregateResults:
    """Decode an array-encoded aggregate page: `[total, row, row, ...]`."""

    if not isinstance(reply, (list, tuple)):
        raise ReplyDecodeError(
            f"Expected an array aggregate reply, got {type(reply).__name__}"
        )
    if not reply:
        raise ReplyDecodeError("Aggregate reply is empty; expected a total count.")
    return AggregateResults(
        total_results=to_int(reply[0], what="total_results"),
        rows=[_row(raw) for raw in reply[1:]],
        format=LEGACY_FORMAT,
    )


def decode_modern_aggregate(reply: Any) -> AggregateResults:
    """Decode a map-encoded aggregate page."""

    if not isinstance(reply, Mapping):
        raise ReplyDecodeError(
            f"Expected a map aggregate reply, got {type(reply).__name__}"
        )
    data = as_map(reply)
    for required in ("total_results", "results"):
        if required not in data:
            raise ReplyDecodeError(f"Aggregate reply has no {required!r} entry.")
    if not isinstance(data["results"], (list, tuple)):
        raise ReplyDecodeError("Aggregate reply 'results' entry is not a list.")

    format_value = data.get("format")
    return AggregateResults(
        total_results=to_int(data["total_results"], what="total_results"),
        rows=[_row(raw) for raw in data["results"]],
        errors=_string_list(data.get("error"), what="error"),
        warnings=_string_list(data.get("warning"), what="warning"),
        format=None if format_value is None else to_str(format_value, what="format"),
    )


def decode_aggregate_reply(
    reply: Any, options: Optional[AggregateOptions] = None, *, with_cursor: Optional[bool] = None
) -> AggregateResults:
    """Decode an `FT.AGGREGATE` or `FT.CURSOR READ` reply.

    Cursor replies wrap the page as `[page, cursor_id]`. They are recognized
    when `options` carries a cursor or `with_cursor` is true.
    """

    if with_cursor is None:
        with_cursor = options is not None and options.cursor is not None

    cursor_id: Optional[int] = None
    if with_cursor:
        if not isinstance(reply, (list, tuple)) or len(reply) != 2:
            raise ReplyDecodeError("Expected a cursor reply as a [page, cursor_id] pair.")
        reply, raw_cursor = reply
        cursor_id = to_int(raw_cursor, what="cursor id")

    if detect_reply_format(reply) is ReplyFormat.MODERN:
        results = decode_modern_aggregate(reply)
    else:
        results = decode_legacy_aggregate(reply)
    results.cursor_id = cursor_id
    return results


def decode_config_reply(reply: Any) -> Dict[str, str]:
    """Decode `FT.CONFIG GET`; hidden `_`-prefixed settings are dropped."""

    if isinstance(reply, Mapping):
        items = list(as_map(reply).items())
    elif isinstance(reply, (list, tuple)):
        items = []
        for entry in reply:
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise ReplyDecodeError("Expected config entries as [name, value] pairs.")
            items.append((to_str(entry[0], what="config name"), entry[1]))
    else:
        raise ReplyDecodeError(f"Unexpected config reply type: {type(reply).__name__}")

    return {
        name: "" if value is None else to_str(value, what=f"config {name!r}")
        for name, value in items
        if not name.startswith("_")
    }


def decode_synonym_dump(reply: Any) -> Dict[str, List[str]]:
    """Decode `FT.SYNDUMP` into a term -> synonym group ids mapping."""

    if isinstance(reply, Mapping):
        items = as_map(reply).items()
    elif isinstance(reply, (list, tuple)):
        items = pairs_to_map(reply, what="synonym dump").items()
    else:
        raise ReplyDecodeError(f"Unexpected synonym dump type: {type(reply).__name__}")

    synonyms: Dict[str, List[str]] = {}
    for term, groups in items:
        if not isinstance(groups, (list, tuple)):
            raise ReplyDecodeError(f"Expected synonym groups of {term!r} as a list.")
        synonyms[term] = [to_str(group, what="synonym group") for group in groups]
    return synonyms


def decode_ok(reply: Any) -> bool:
    """Return whether a simple status reply is `OK`."""

    if isinstance(reply, bool):
        return reply
    if reply is None:
        return False
    return to_str(reply, what="status reply").upper() == "OK"


def decode_int(reply: Any) -> int:
    return to_int(reply, what="integer reply")


def decode_string_list(reply: Any) -> List[str]:
    """Decode an array or set reply of strings, keeping array order."""

    if reply is None:
        return []
    if isinstance(reply, (set, frozenset)):
        return sorted(to_str(item, what="list entry") for item in reply)
    if not isinstance(reply, (list, tuple)):
        raise ReplyDecodeError(f"Expected a list reply, got {type(reply).__name__}")
    return [to_str(item, what="list entry") for item in reply]
