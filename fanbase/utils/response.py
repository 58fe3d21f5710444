# fanbase/utils/response.py

import json
import logging
from typing import List, Tuple

import msgpack
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

MSGPACK_MEDIA_TYPE = "application/x-msgpack"


def wants_msgpack(scope: Scope) -> bool:
    for name, value in scope.get("headers", []):
        if name == b"accept" and MSGPACK_MEDIA_TYPE in value.decode("latin-1"):
            return True
    return False


def _replace_body_headers(
    headers: List[Tuple[bytes, bytes]], content_type: bytes, length: int, status: int
) -> List[Tuple[bytes, bytes]]:
    kept = [
        (name, value)
        for name, value in headers
        if name.lower() not in (b"content-type", b"content-length")
    ]
    if content_type:
        kept.append((b"content-type", content_type))
    if status not in (204, 304):
        kept.append((b"content-length", str(length).encode()))
    return kept


class MessagePackMiddleware:
    """
    Re-encode JSON responses as MessagePack for clients sending
    ``Accept: application/x-msgpack``. Other responses pass through unchanged.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http" or not wants_msgpack(scope):
            await self.app(scope, receive, send)
            return

        start: Message = {}
        chunks: List[bytes] = []

        async def buffered_send(message: Message):
            if message["type"] == "http.response.start":
                start.update(message)
                return
            if message["type"] != "http.response.body":
                await send(message)
                return
            chunks.append(message.get("body", b""))
            if message.get("more_body", False):
                return

            body = b"".join(chunks)
            headers = start.get("headers", [])
            content_type = next(
                (v for k, v in headers if k.lower() == b"content-type"), b""
            )
            if content_type.startswith(b"application/json") and body:
                body = msgpack.packb(json.loads(body), use_bin_type=True)
                content_type = MSGPACK_MEDIA_TYPE.encode()
                logger.debug("Encoded %s response as MessagePack", scope.get("path"))
            start["headers"] = _replace_body_headers(
                headers, content_type, len(body), start.get("status", 200)
            )
            await send(start)
            await send({"type": "http.response.body", "body": body})

        await self.app(scope, receive, buffered_send)
