"""Internal helpers that coerce raw reply primitives into Python values."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict

from .errors import ReplyDecodeError


def to_str(value: Any, *, what: str = "value") -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ReplyDecodeError(f"Expected string {what}, got {type(value).__name__}")


def to_int(value: Any, *, what: str = "value") -> int:
    if isinstance(value, bool):
        raise ReplyDecodeError(f"Expected integer {what}, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (str, bytes, bytearray)):
        text = to_str(value, what=what)
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError as exc:
            raise ReplyDecodeError(f"Expected integer {what}, got {text!r}") from exc
        if number.is_integer():
            return int(number)
        raise ReplyDecodeError(f"Expected integer {what}, got {text!r}")
    raise ReplyDecodeError(f"Expected integer {what}, got {type(value).__name__}")


def to_float(value: Any, *, what: str = "value") -> float:
    if isinstance(value, bool):
        raise ReplyDecodeError(f"Expected numeric {what}, got bool")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (str, bytes, bytearray)):
        text = to_str(value, what=what)
        try:
            return float(text)
        except ValueError as exc:
            raise ReplyDecodeError(f"Expected numeric {what}, got {text!r}") from exc
    raise ReplyDecodeError(f"Expected numeric {what}, got {type(value).__name__}")


def to_native(value: Any) -> Any:
    """Recursively decode bytes and normalize mapping keys to strings."""

    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    if isinstance(value, Mapping):
        return {to_str(key, what="key"): to_native(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_native(item) for item in value]
    return value


def pairs_to_map(value: Any, *, what: str = "field list") -> Dict[str, Any]:
    """Convert a flat `[k1, v1, k2, v2, ...]` list into a dict."""

    if not isinstance(value, (list, tuple)):
        raise ReplyDecodeError(f"Expected {what} as a list, got {type(value).__name__}")
    if len(value) % 2:
        raise ReplyDecodeError(f"Odd number of entries in {what}: {len(value)}")
    return {
        to_str(value[i], what="field name"): value[i + 1]
        for i in range(0, len(value), 2)
    }


def as_map(value: Any, *, what: str = "reply") -> Dict[str, Any]:
    """Accept either a mapping or a flat pair list and return a str-keyed dict."""

    if isinstance(value, Mapping):
        return {to_str(key, what="key"): item for key, item in value.items()}
    return pairs_to_map(value, what=what)
