import asyncio
import json
import logging
from typing import Any, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

KEY_PREFIX = "corpus:"
DEFAULT_TTL = 24 * 60 * 60


class CorpusCache:
    """Redis copy of corpus API payloads, keyed by request path.

    A slow or unreachable Redis counts as a miss, so every call is bounded by `timeout`.
    """

    def __init__(self, redis: Redis, ttl: int = DEFAULT_TTL, timeout: float = 1.0):
        self.redis = redis
        self.ttl = ttl
        self.timeout = timeout

    @classmethod
    def from_url(cls, url: str, ttl: int = DEFAULT_TTL, timeout: float = 1.0) -> "CorpusCache":
        redis = Redis.from_url(
            url,
            decode_responses=True,
            health_check_interval=30,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
        )
        return cls(redis, ttl, timeout)

    async def get(self, path: str) -> Optional[Any]:
        try:
            cached = await asyncio.wait_for(self.redis.get(KEY_PREFIX + path), timeout=self.timeout)
        except asyncio.TimeoutError:
            logging.warning(f"Corpus cache read timed out for {path}")
            return None
        except RedisError as e:
            logging.warning(f"Corpus cache read failed for {path}: {e}")
            return None
        if cached is None:
            return None
        return json.loads(cached)

    async def set(self, path: str, data: Any) -> None:
        try:
            await asyncio.wait_for(
                self.redis.set(KEY_PREFIX + path, json.dumps(data), ex=self.ttl),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logging.warning(f"Corpus cache write timed out for {path}")
        except RedisError as e:
            logging.warning(f"Corpus cache write failed for {path}: {e}")

    async def close(self) -> None:
        await self.redis.aclose()
