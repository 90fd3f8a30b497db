"""Helpers that let async clients drive sync or async transports."""

from __future__ import annotations

import inspect
from typing import Awaitable, TypeVar, Union

T = TypeVar("T")


async def _maybe_await(value: Union[T, Awaitable[T]]) -> T:
    """Return a transport or page-fetch result, awaiting it when needed."""

    if inspect.isawaitable(value):
        return await value
    return value  # type: ignore[return-value]
