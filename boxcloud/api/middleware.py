"""
Request admission middleware.

- `SimpleRateLimitMiddleware`: fixed-window limit per client address. Every
  response carries `X-RateLimit-Limit`, `X-RateLimit-Remaining` and
  `X-RateLimit-Reset`; requests over the limit get 429 with `Retry-After`.
- `RequestSizeLimitMiddleware`: rejects a request whose declared
  `Content-Length` is above the limit with 413, before routing.
- `SecurityHeadersMiddleware`: baseline browser hardening headers. Framing
  stays open (`frame-ancestors *`) so stored PDFs can be embedded elsewhere.
"""

import threading
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse


class InMemoryRateLimitStore:
    """
    Fixed-window counters kept in process memory.

    A key's window opens with its first request and lasts `window` seconds.
    """

    def __init__(self, limit: int = 100):
        self.limit = limit
        self._buckets: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def incr(self, key: str, window: int) -> tuple[int, int, int]:
        """
        Count one request for `key`.

        Returns
        -------
        tuple[int, int, int]
            (count in the current window, limit, window reset as epoch seconds)
        """
        now = time.time()
        with self._lock:
            for stale in [k for k, (start, _) in self._buckets.items() if now >= start + window]:
                del self._buckets[stale]
            start, count = self._buckets.get(key, (now, 0))
            count += 1
            self._buckets[key] = (start, count)
        return count, self.limit, int(start + window)

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class SimpleRateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        limit: int = 100,
        window: int = 900,
        key_fn: Callable[[Request], str] | None = None,
        store: InMemoryRateLimitStore | None = None,
    ):
        super().__init__(app)
        self.limit = limit
        self.window = max(1, int(window))
        self.key_fn = key_fn or client_address
        self.store = store or InMemoryRateLimitStore(limit=limit)

    async def dispatch(self, request, call_next):
        count, limit, reset = self.store.incr(self.key_fn(request), self.window)
        remaining = max(0, limit - count)
        headers = {
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": str(remaining),
            "X-RateLimit-Reset": str(reset),
        }
        if count > limit:
            headers["Retry-After"] = str(max(0, reset - int(time.time())))
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Too many requests",
                    "message": "Too many requests from this IP, please try again later",
                },
                headers=headers,
            )

        response = await call_next(request)
        for name, value in headers.items():
            response.headers[name] = value
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_bytes: int = 1_000_000):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request, call_next):
        length = request.headers.get("content-length")
        try:
            size = int(length) if length is not None else None
        except ValueError:
            size = None
        if size is not None and size > self.max_bytes:
            return JSONResponse(
                status_code=413,
                content={"error": "File too large", "message": "Request body exceeds allowed size"},
            )
        return await call_next(request)


CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "style-src 'self' 'unsafe-inline'",
        "script-src 'self'",
        "img-src 'self' data: blob:",
        "font-src 'self'",
        "connect-src 'self'",
        "frame-src *",
        "frame-ancestors *",
        "object-src 'none'",
        "media-src 'self'",
        "worker-src 'self' blob:",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "cross-origin",
    "X-DNS-Prefetch-Control": "off",
    "X-Permitted-Cross-Domain-Policies": "none",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, headers: dict[str, str] | None = None):
        super().__init__(app)
        self.headers = dict(SECURITY_HEADERS if headers is None else headers)

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        # Headers set by a route win.
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
