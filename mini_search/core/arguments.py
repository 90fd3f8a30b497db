"""Argument list builders shared by every command option model.

This module centralizes the small token-emission rules of the search command
grammar. Option models stay focused on which options exist while the rules for
flags, counted lists, range bounds and parameters live in one place.
"""

from __future__ import annotations

import math
from datetime import timedelta
from typing import Any, Optional, Sequence

from .types import CommandArgs, Params


def serialize_counted_args(
    name: str, values: Optional[Sequence[Any]], *, include_zero: bool = False
) -> CommandArgs:
    """Serialize a list as `NAME <count> v1 v2 ...`.

    Args:
        name: Option name emitted before the count.
        values: Values to emit. `None` is treated as an empty list.
        include_zero: Emit `NAME 0` for an empty list instead of nothing.

    Returns:
        The token list, empty when the option should be omitted.
    """

    items = list(values or [])
    if not items and not include_zero:
        return []
    return [name, len(items), *items]


def append_flag(args: CommandArgs, enabled: bool, token: str) -> CommandArgs:
    """Append a bare flag token when `enabled` is true."""

    if enabled:
        args.append(token)
    return args


def append_value(
    args: CommandArgs, name: str, value: Any, default: Any = None
) -> CommandArgs:
    """Append `NAME VALUE` unless the value is unset or equal to its default."""

    if value is None or value == default:
        return args
    args.extend((name, value))
    return args


def filter_value(value: float, exclusive: bool = False) -> str:
    """Format one numeric range bound for `FILTER`.

    Infinities render as `+inf` / `-inf`, finite values use six decimals and an
    exclusive bound is prefixed with `(`.
    """

    prefix = "(" if exclusive else ""
    number = float(value)
    if math.isinf(number):
        return f"{prefix}{'-inf' if number < 0 else '+inf'}"
    if math.isnan(number):
        raise ValueError("Filter bounds must not be NaN.")
    return f"{prefix}{number:f}"


def serialize_params(params: Optional[Params]) -> CommandArgs:
    """Serialize named query parameters as `PARAMS <pairs> k1 v1 ...`."""

    if not params:
        return []
    args: CommandArgs = ["PARAMS", len(params)]
    for key, value in params.items():
        args.extend((key, value))
    return args


def milliseconds(value: timedelta | int | float | None) -> Optional[int]:
    """Normalize a duration option to whole milliseconds."""

    if value is None:
        return None
    if isinstance(value, timedelta):
        return int(value.total_seconds() * 1000)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Unsupported duration type: {type(value).__name__}")
    return int(value)
