"""FastAPI dependencies for injection."""
from fastapi import Depends, Request, Response

from core.config import Settings, get_settings
from core.rate_limit import OperationType, Quota, RateLimiter, RateLimitExceededError
from db.session import get_async_session


def get_rate_limiter(request: Request) -> RateLimiter | None:
    """The limiter built in the lifespan, or None when the app runs without one."""
    return getattr(request.app.state, "rate_limiter", None)


async def check_rate_limit(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
    limiter: RateLimiter | None = Depends(get_rate_limiter),
) -> Quota | None:
    """
    Count the request against its client's window.

    Successful responses carry the X-RateLimit-* headers. An exhausted window
    raises RateLimitExceededError, which the app turns into a 429.
    """
    if not settings.rate_limit_enabled or limiter is None:
        return None

    client = request.client.host if request.client else "unknown"
    quota = await limiter.hit(client, OperationType.for_method(request.method))
    if not quota.allowed:
        raise RateLimitExceededError(quota)

    response.headers.update(quota.headers())
    return quota


__all__ = [
    "check_rate_limit",
    "get_async_session",
    "get_rate_limiter",
    "get_settings",
]
