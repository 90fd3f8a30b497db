"""Core port contracts used by transport adapters and clients."""

from __future__ import annotations

from typing import Protocol, Sequence

from .types import RawReply, Token


class TransportPort(Protocol):
    """Transport behavior required by `SearchClient`.

    The transport sends one command and returns its raw reply. Connection
    handling, retries and authentication all belong to the transport.
    """

    def execute(self, args: Sequence[Token]) -> RawReply: ...


class AsyncTransportPort(Protocol):
    """Async transport behavior required by `AsyncSearchClient`."""

    async def execute(self, args: Sequence[Token]) -> RawReply: ...
