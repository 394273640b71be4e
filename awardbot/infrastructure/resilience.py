import json
import time
from typing import Dict, Optional
from collections import defaultdict, deque

import redis

WEBHOOK_PATH = "/whatsapp/webhook"


class RateLimiter:
    """Sliding-window limiter; Redis-backed when a client is given, in-process otherwise."""

    def __init__(self, redis_client: Optional[redis.Redis] = None):
        self.redis_client = redis_client
        self.local_cache = defaultdict(lambda: deque(maxlen=1000))
        self._last_sweep = 0.0

    def check_rate_limit(
        self,
        key: str,
        max_requests: int,
        window_seconds: int
    ) -> tuple[bool, Dict]:
        if self.redis_client:
            return self._check_redis_rate_limit(key, max_requests, window_seconds)
        return self._check_local_rate_limit(key, max_requests, window_seconds)

    def _check_redis_rate_limit(
        self,
        key: str,
        max_requests: int,
        window_seconds: int
    ) -> tuple[bool, Dict]:
        redis_key = f"rate_limit:{key}"
        now = time.time()
        pipeline = self.redis_client.pipeline()

        pipeline.zremrangebyscore(redis_key, 0, now - window_seconds)
        pipeline.zadd(redis_key, {str(now): now})
        pipeline.zcard(redis_key)
        pipeline.expire(redis_key, window_seconds + 1)

        results = pipeline.execute()
        request_count = results[2]

        allowed = request_count <= max_requests
        return allowed, {
            "allowed": allowed,
            "current": request_count,
            "limit": max_requests,
            "window_seconds": window_seconds,
            "retry_after": window_seconds if not allowed else None
        }

    def _evict_idle(self, now: float, window_seconds: int) -> None:
        # at most one sweep per window; drops clients with no request inside it
        if now - self._last_sweep < window_seconds:
            return
        self._last_sweep = now
        cutoff = now - window_seconds
        for key in [k for k, times in self.local_cache.items() if not times or times[-1] < cutoff]:
            del self.local_cache[key]

    def _check_local_rate_limit(
        self,
        key: str,
        max_requests: int,
        window_seconds: int
    ) -> tuple[bool, Dict]:
        now = time.time()
        self._evict_idle(now, window_seconds)
        request_times = self.local_cache[key]

        cutoff = now - window_seconds
        while request_times and request_times[0] < cutoff:
            request_times.popleft()

        if len(request_times) < max_requests:
            request_times.append(now)
            return True, {
                "allowed": True,
                "current": len(request_times),
                "limit": max_requests,
                "window_seconds": window_seconds
            }

        return False, {
            "allowed": False,
            "current": len(request_times),
            "limit": max_requests,
            "window_seconds": window_seconds,
            "retry_after": window_seconds
        }


class RequestValidator:
    @staticmethod
    def validate_whatsapp_message(data: Dict) -> tuple[bool, Optional[str]]:
        for field in ("Body", "From", "To"):
            if data.get(field) is None:
                return False, f"Missing required field: {field}"

        if not data["From"].startswith("whatsapp:"):
            return False, "Invalid From number format"

        # WhatsApp caps message bodies at 4096 chars
        if len(data["Body"]) > 4096:
            return False, "Message too long"

        return True, None


class ProductionMiddleware:
    """Rate-limits the webhook per client IP before it reaches the app."""

    def __init__(self, app, redis_client: Optional[redis.Redis] = None,
                 max_requests: int = 60, window_seconds: int = 60):
        self.app = app
        self.rate_limiter = RateLimiter(redis_client)
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["path"] == WEBHOOK_PATH:
            client_ip = (scope.get("client") or ("unknown", None))[0]
            allowed, limit_info = self.rate_limiter.check_rate_limit(
                f"ip:{client_ip}",
                max_requests=self.max_requests,
                window_seconds=self.window_seconds,
            )
            if not allowed:
                await self._send_rate_limit_response(send, limit_info)
                return

        await self.app(scope, receive, send)

    async def _send_rate_limit_response(self, send, limit_info: Dict):
        await send({
            "type": "http.response.start",
            "status": 429,
            "headers": [
                [b"content-type", b"application/json"],
                [b"retry-after", str(limit_info["retry_after"]).encode()],
            ],
        })
        await send({
            "type": "http.response.body",
            "body": json.dumps({"error": "Rate limit exceeded"}).encode(),
        })
