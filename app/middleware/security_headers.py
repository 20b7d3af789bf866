"""Security headers middleware.

Adds security-related response headers to every JSON API response. HSTS is
only sent when enabled (off in local debug over plain HTTP).
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

from typing import Callable

API_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}
HSTS_HEADER = ("Strict-Transport-Security", "max-age=31536000; includeSubDomains")


def SecurityHeadersMiddleware(app: Callable, *, hsts: bool = True) -> Callable:
    """Set security headers on all responses unless the route already set them. Raw ASGI."""
    pairs = list(API_HEADERS.items()) + ([HSTS_HEADER] if hsts else [])
    encoded = [(k.lower().encode(), v.encode()) for k, v in pairs]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                present = {name.lower() for name, _ in headers}
                headers.extend(h for h in encoded if h[0] not in present)
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
