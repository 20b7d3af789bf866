"""Request timeout middleware.

Cancels the request if it runs longer than the configured timeout
(asyncio.wait_for); the open transaction is rolled back by the session's
context manager. Raw ASGI.
"""

import asyncio
import json
import logging
from typing import Callable

logger = logging.getLogger(__name__)


async def _send_timeout(send: Callable, timeout_seconds: int) -> None:
    body = json.dumps(
        {
            "error": "GATEWAY_TIMEOUT",
            "message": f"Request timed out after {timeout_seconds} seconds",
            "details": {"timeout_seconds": timeout_seconds},
        }
    ).encode()
    await send({
        "type": "http.response.start",
        "status": 504,
        "headers": [(b"content-type", b"application/json")],
    })
    await send({"type": "http.response.body", "body": body, "more_body": False})


def TimeoutMiddleware(app: Callable, timeout_seconds: int) -> Callable:
    """Cancel request after timeout_seconds and answer 504 if nothing was sent yet."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(app(scope, receive, send_wrapper), timeout=float(timeout_seconds))
        except asyncio.TimeoutError:
            logger.warning(
                "Request timed out after %s seconds: %s %s (request_id=%s)",
                timeout_seconds,
                scope.get("method", ""),
                scope.get("path", ""),
                scope.get("state", {}).get("request_id"),
            )
            if not started:
                await _send_timeout(send, timeout_seconds)

    return asgi_app
