"""Public port exports for concrete transport implementations."""

from .redis import AsyncRedisTransport, RedisTransport

__all__ = ["RedisTransport", "AsyncRedisTransport"]
