"""Shared core type aliases used across contracts, serializers, and decoders."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Union

Token = Union[str, bytes, int, float]
CommandArgs = List[Any]

RawReply = Union[Sequence[Any], Mapping[Any, Any]]
FieldMap = Dict[str, str]
Params = Mapping[str, Any]
