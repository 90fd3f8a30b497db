"""Redis transport adapter exports."""

from .transport import AsyncRedisTransport, RedisTransport

__all__ = ["RedisTransport", "AsyncRedisTransport"]
