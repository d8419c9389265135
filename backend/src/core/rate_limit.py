"""
Per-client request throttling backed by Redis.

Each client address gets one counter per operation type per clock minute.
Reads and writes are counted separately so a burst of writes never locks a
client out of reading. Whenever Redis is disabled or unreachable the
limiter lets every request through.
"""
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from redis.asyncio import Redis
from redis.exceptions import RedisError

from core.config import Settings

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60


class OperationType(Enum):
    """What a request does to the store, as far as throttling cares."""

    READ = "read"
    WRITE = "write"

    @classmethod
    def for_method(cls, method: str) -> "OperationType":
        """Safe HTTP methods read, everything else writes."""
        return cls.READ if method in ("GET", "HEAD") else cls.WRITE


@dataclass(frozen=True)
class Quota:
    """A client's standing in the current window after counting one request."""

    limit: int
    used: int
    reset: int  # Unix time the window closes

    @property
    def allowed(self) -> bool:
        return self.used <= self.limit

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    def retry_after(self, now: int | None = None) -> int:
        """Seconds until the window closes, at least one."""
        now = int(time.time()) if now is None else now
        return max(1, self.reset - now)

    def headers(self) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }


class RateLimitExceededError(Exception):
    """Raised when a client has used up its window."""

    def __init__(self, quota: Quota) -> None:
        self.quota = quota
        super().__init__("Rate limit exceeded")


class RateLimiter:
    """
    Fixed-window counter per (client, operation), stored in Redis.

    Keys look like ``rate:<client>:<operation>:<window start>`` and expire
    with their window, so nothing needs cleaning up.
    """

    def __init__(
        self,
        redis: Redis | None,
        limits: Mapping[OperationType, int],
    ) -> None:
        self._redis = redis
        self._limits = dict(limits)

    @classmethod
    async def from_settings(cls, settings: Settings) -> "RateLimiter":
        """Connect to Redis if enabled; fall back to a pass-through limiter."""
        limits = {
            OperationType.READ: settings.rate_limit_reads_per_minute,
            OperationType.WRITE: settings.rate_limit_writes_per_minute,
        }
        if not settings.redis_enabled:
            logger.info("rate_limit_disabled")
            return cls(None, limits)

        redis = Redis.from_url(settings.redis_url)
        try:
            await redis.ping()
        except RedisError as e:
            logger.warning("redis_unavailable", extra={"error": str(e)})
            await redis.aclose()
            return cls(None, limits)
        return cls(redis, limits)

    @property
    def connected(self) -> bool:
        return self._redis is not None

    def limit_for(self, operation: OperationType) -> int:
        return self._limits[operation]

    async def ping(self) -> bool:
        """True when Redis answers."""
        if self._redis is None:
            return False
        try:
            return bool(await self._redis.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

    async def hit(
        self,
        client: str,
        operation: OperationType,
        now: int | None = None,
    ) -> Quota:
        """Count one request for ``client`` and return the resulting quota."""
        now = int(time.time()) if now is None else now
        window_start = now - now % WINDOW_SECONDS
        limit = self._limits[operation]
        unused = Quota(limit=limit, used=0, reset=window_start + WINDOW_SECONDS)
        if self._redis is None:
            return unused

        key = f"rate:{client}:{operation.value}:{window_start}"
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, WINDOW_SECONDS)
                used, _ = await pipe.execute()
        except RedisError as e:
            logger.warning("rate_limit_check_failed", extra={"client": client, "error": str(e)})
            return unused

        quota = Quota(limit=limit, used=used, reset=unused.reset)
        if not quota.allowed:
            logger.warning(
                "rate_limit_exceeded",
                extra={"client": client, "operation": operation.value},
            )
        return quota
