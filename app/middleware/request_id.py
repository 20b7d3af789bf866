"""Request ID middleware.

Generates or forwards X-Request-ID, exposes it as request.state.request_id
(recorded on audit rows) and echoes it on the response. Client-provided
values are checked (length + character set) to prevent log injection.
Raw ASGI.
"""

import re
import uuid
from typing import Callable

REQUEST_ID_MAX_LENGTH = 64
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def resolve_request_id(raw: str | None) -> str:
    """Return raw when it is a safe id; otherwise a fresh UUID4 hex string."""
    candidate = (raw or "").strip()
    if _REQUEST_ID_RE.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Add or forward the request id header on each request and response. Raw ASGI."""
    header_key = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        raw = next(
            (v.decode("latin-1") for k, v in scope.get("headers", []) if k.lower() == header_key),
            None,
        )
        request_id = resolve_request_id(raw)
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_key, request_id.encode()),
                ]
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
