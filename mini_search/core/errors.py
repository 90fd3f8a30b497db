"""Exception types raised while interpreting search engine replies."""

from __future__ import annotations


class SearchError(Exception):
    """Base class for errors raised by mini_search."""


class ReplyDecodeError(SearchError, ValueError):
    """Raised when a raw reply does not match a known reply shape."""


class SchemaParseError(ReplyDecodeError):
    """Raised when index metadata names an attribute type that cannot be rebuilt."""

    def __init__(self, attribute_type: str) -> None:
        super().__init__(f"Unhandled schema attribute type: {attribute_type!r}")
        self.attribute_type = attribute_type
