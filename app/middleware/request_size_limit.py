"""Request body size limit middleware.

Rejects bodies above ``max_bytes`` with 413, both for requests that
declare Content-Length and for chunked uploads (which are buffered and
replayed). Raw ASGI.
"""

import json
from typing import Any, Callable


def _get_header(scope: dict, name: str) -> str | None:
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


async def _send_413(send: Callable, max_bytes: int, actual: int) -> None:
    details: dict[str, Any] = {"max_bytes": max_bytes, "content_length": actual}
    body = json.dumps(
        {
            "success": False,
            "error": "PAYLOAD_TOO_LARGE",
            "message": f"Request body must be at most {max_bytes} bytes",
            "details": details,
        }
    ).encode()
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [(b"content-type", b"application/json")],
    })
    await send({"type": "http.response.body", "body": body, "more_body": False})


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = _get_header(scope, "content-length")
        if declared is not None and declared.isdigit():
            if int(declared) > max_bytes:
                await _send_413(send, max_bytes, int(declared))
                return
            await app(scope, receive, send)
            return

        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                # Client went away before finishing the body.
                return
            body = message.get("body", b"")
            total += len(body)
            if total > max_bytes:
                await _send_413(send, max_bytes, total)
                return
            chunks.append(body)
            if not message.get("more_body", False):
                break

        buffered = b"".join(chunks)
        replayed = False

        async def replay_receive() -> dict:
            nonlocal replayed
            if replayed:
                return await receive()
            replayed = True
            return {"type": "http.request", "body": buffered, "more_body": False}

        await app(scope, replay_receive, send)

    return asgi_app
