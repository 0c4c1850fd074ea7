"""
Rate limiting for the public search API
Redis sorted-set sliding window, 60 searches per minute per client by default
"""

import time
import uuid
import logging
from dataclasses import dataclass
from typing import Dict, Optional
from fastapi import Request, Response, HTTPException
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from . import config

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    limited: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after: Optional[int] = None

    def headers(self) -> Dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }
        if self.retry_after:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class RateLimiter:
    """Simple rate limiter using Redis sliding window."""

    def __init__(self, redis_url: str = None, redis_client: Optional[aioredis.Redis] = None):
        self.redis_url = redis_url or config.REDIS_URL
        self.redis = redis_client

    async def init_redis(self):
        """Initialize Redis connection."""
        if not self.redis:
            self.redis = aioredis.from_url(self.redis_url, decode_responses=True)

    async def hit(self, key: str, limit: int, window: int) -> RateLimitResult:
        """
        Record one request for key and report whether it is over the limit.
        Args:
            key: Unique identifier (prefix and client IP)
            limit: Max requests allowed in the window
            window: Time window in seconds
        """
        await self.init_redis()

        now = time.time()
        window_start = now - window
        redis_key = f"rate_limit:{key}"

        # Use Redis pipeline for atomic operations
        pipe = self.redis.pipeline()

        # Remove old entries
        pipe.zremrangebyscore(redis_key, 0, window_start)

        # Count current requests
        pipe.zcard(redis_key)

        # Add current request
        pipe.zadd(redis_key, {f"{now}:{uuid.uuid4().hex}": now})

        # Set TTL
        pipe.expire(redis_key, window + 10)

        results = await pipe.execute()
        current_count = results[1]  # Count result

        limited = current_count >= limit
        return RateLimitResult(
            limited=limited,
            limit=limit,
            remaining=max(0, limit - current_count - 1),
            reset_at=int(now) + window,
            retry_after=window if limited else None
        )

    async def ping(self) -> bool:
        await self.init_redis()
        return await self.redis.ping()

    async def close(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None


# Global rate limiter instance
rate_limiter = RateLimiter()


def get_client_ip(request: Request) -> str:
    client_ip = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if not client_ip:
        client_ip = request.headers.get("X-Real-IP", "")
    if not client_ip:
        client_ip = getattr(request.client, "host", None) or "unknown"
    return client_ip


async def search_rate_limit(request: Request, response: Response) -> Optional[RateLimitResult]:
    """FastAPI dependency limiting public searches per client IP."""
    if not config.RATE_LIMIT_ENABLED:
        return None

    client_ip = get_client_ip(request)
    try:
        result = await rate_limiter.hit(
            f"search:{client_ip}",
            limit=config.SEARCH_RATE_LIMIT,
            window=config.SEARCH_RATE_WINDOW_SECONDS
        )
    except (RedisError, OSError) as e:
        # Continue without rate limiting if Redis fails
        logger.error(f"Rate limiting error: {e}")
        return None

    if result.limited:
        logger.warning(f"Rate limit exceeded for {client_ip} on {request.url.path}")
        raise HTTPException(
            status_code=429,
            detail={
                "error": "Too Many Requests",
                "message": f"Rate limit exceeded. Please try again in {result.retry_after} seconds.",
                "retryAfter": result.retry_after
            },
            headers=result.headers()
        )

    response.headers.update(result.headers())
    return result
