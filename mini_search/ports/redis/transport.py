"""Redis transport adapters for the search client ports.

These adapters are optional and require the `redis` package installed.
"""

from __future__ import annotations

from typing import Any, Sequence

from ...core.types import RawReply, Token


def _require_redis() -> Any:
    try:
        import redis  # type: ignore[import-not-found]
    except ImportError as exc:  # pragma: no cover - env dependent
        raise ImportError(
            "redis is required for RedisTransport. "
            "Install with `pip install redis`."
        ) from exc
    return redis


class RedisTransport:
    """Transport that sends raw commands through a redis-py client.

    `client` is any object exposing `execute_command(*args)`, normally a
    `redis.Redis`. Replies are returned untouched so that both the legacy
    (protocol 2) and map (protocol 3) encodings reach the decoder.
    """

    def __init__(self, client: Any) -> None:
        if not callable(getattr(client, "execute_command", None)):
            raise TypeError("client must provide an execute_command() method")
        self._client = client

    @classmethod
    def from_url(cls, url: str, *, protocol: int = 2, **kwargs: Any) -> RedisTransport:
        """Connect with `redis.Redis.from_url` using decoded string replies.

        Args:
            url: Connection URL such as `redis://localhost:6379/0`.
            protocol: Reply protocol, 2 for array replies or 3 for map replies.
            **kwargs: Extra connection options passed to redis-py.
        """

        redis = _require_redis()
        kwargs.setdefault("decode_responses", True)
        return cls(redis.Redis.from_url(url, protocol=protocol, **kwargs))

    @property
    def client(self) -> Any:
        return self._client

    def execute(self, args: Sequence[Token]) -> RawReply:
        return self._client.execute_command(*args)

    def close(self) -> None:
        self._client.close()


class AsyncRedisTransport:
    """Async transport over a `redis.asyncio.Redis` client."""

    def __init__(self, client: Any) -> None:
        if not callable(getattr(client, "execute_command", None)):
            raise TypeError("client must provide an execute_command() method")
        self._client = client

    @classmethod
    def from_url(
        cls, url: str, *, protocol: int = 2, **kwargs: Any
    ) -> AsyncRedisTransport:
        _require_redis()
        import redis.asyncio as redis_asyncio  # type: ignore[import-not-found]

        kwargs.setdefault("decode_responses", True)
        return cls(redis_asyncio.Redis.from_url(url, protocol=protocol, **kwargs))

    @property
    def client(self) -> Any:
        return self._client

    async def execute(self, args: Sequence[Token]) -> RawReply:
        return await self._client.execute_command(*args)

    async def close(self) -> None:
        await self._client.aclose()
