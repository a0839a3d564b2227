# linkserve/file_content/sinks.py
from __future__ import annotations
from typing import Any, Awaitable, Callable, MutableMapping, Optional, Protocol

Message = MutableMapping[str, Any]
Send = Callable[[Message], Awaitable[None]]


class Sink(Protocol):
    async def write(self, data: bytes) -> None: ...


class ASGIBodySink:
    """
    Writes chunks as `http.response.body` messages.
    The response start message must already have been sent.

    With `limit` set, bytes past the declared Content-Length are dropped
    so the body never outgrows its framing.
    """

    def __init__(self, send: Send, limit: Optional[int] = None):
        self._send = send
        self.limit = limit
        self.bytes_written = 0
        self.closed = False

    async def write(self, data: bytes) -> None:
        if self.limit is not None:
            data = data[: max(self.limit - self.bytes_written, 0)]
        if not data:
            return
        await self._send({"type": "http.response.body", "body": data, "more_body": True})
        self.bytes_written += len(data)

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})


class BufferSink:
    def __init__(self) -> None:
        self.buffer = bytearray()

    async def write(self, data: bytes) -> None:
        self.buffer.extend(data)

    def getvalue(self) -> bytes:
        return bytes(self.buffer)
