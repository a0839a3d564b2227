# linkserve/file_content/response.py
"""
Starlette response that serves a file through a FileResponder.

Headers come from `resolve()`, so a link reports its target's real size
in Content-Length and Content-Range. The body is written by the
responder picked for the path (see responders.select_responder).
"""
from __future__ import annotations
import logging
import os
from typing import Mapping, Optional, Union

import anyio
from starlette.background import BackgroundTask
from starlette.datastructures import MutableHeaders
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from .cancellation import CancellationToken
from .errors import CopyCancelledError, RangeNotSatisfiableError
from .metadata import resolve
from .models import FileResult, ResponseContext
from .responders import FileResponder, select_responder
from .services import build_headers, parse_range, range_length
from .sinks import ASGIBodySink
from .utils import guess_mime_from_path

log = logging.getLogger(__name__)


class LinkAwareFileResponse(Response):
    def __init__(
        self,
        path: Union[str, "os.PathLike[str]"],
        *,
        range_header: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        media_type: Optional[str] = None,
        filename: Optional[str] = None,
        download: bool = False,
        method: Optional[str] = None,
        responder: Optional[FileResponder] = None,
        background: Optional[BackgroundTask] = None,
    ) -> None:
        self.path = os.fspath(path)
        self.range_header = range_header
        self.filename = filename
        self.download = download
        self.send_header_only = method is not None and method.upper() == "HEAD"
        self.responder = responder
        self.status_code = 200
        self.media_type = media_type or guess_mime_from_path(self.path)
        self.background = background
        self.init_headers(headers)

    async def _send_not_satisfiable(self, send: Send, total: int) -> None:
        # keep caller headers (CORS etc.), the body is empty
        headers = MutableHeaders(raw=list(self.raw_headers))
        headers["content-range"] = f"bytes */{total}"
        headers["content-length"] = "0"
        await send({"type": "http.response.start", "status": 416, "headers": headers.raw})
        await send({"type": "http.response.body", "body": b"", "more_body": False})

    @staticmethod
    async def _listen_for_disconnect(receive: Receive, token: CancellationToken) -> None:
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                token.cancel()
                return

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._send_file(receive, send)
        if self.background is not None:
            await self.background()

    async def _send_file(self, receive: Receive, send: Send) -> None:
        meta = await anyio.to_thread.run_sync(resolve, self.path)
        if not meta.exists:
            raise RuntimeError(f"File at path {self.path} does not exist.")

        try:
            byte_range = parse_range(self.range_header, meta.length)
        except RangeNotSatisfiableError:
            log.debug("unsatisfiable range %r for %s (%s bytes)", self.range_header, self.path, meta.length)
            await self._send_not_satisfiable(send, meta.length)
            return

        if byte_range is not None:
            self.status_code = 206
        for key, value in build_headers(
            meta, byte_range, filename=self.filename, download=self.download
        ).items():
            self.headers.setdefault(key, value)

        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self.raw_headers,
            }
        )
        if self.send_header_only:
            await send({"type": "http.response.body", "body": b"", "more_body": False})
            return

        # The responder re-measures the file; if it grew since the headers
        # were built, bytes past Content-Length are dropped.
        declared = range_length(byte_range) if byte_range is not None else meta.length
        sink = ASGIBodySink(send, limit=declared)
        token = CancellationToken(reason="client disconnected")
        context = ResponseContext(sink=sink, cancel=token)
        result = FileResult(path=self.path, media_type=self.media_type, filename=self.filename)
        responder = self.responder or await anyio.to_thread.run_sync(select_responder, self.path)
        error: Optional[BaseException] = None

        async with anyio.create_task_group() as tg:

            async def send_body() -> None:
                nonlocal error
                try:
                    await responder.write_file(context, result, byte_range, range_length(byte_range))
                except CopyCancelledError:
                    log.debug("client went away while sending %s", self.path)
                except Exception as exc:
                    error = exc
                finally:
                    tg.cancel_scope.cancel()

            tg.start_soon(self._listen_for_disconnect, receive, token)
            tg.start_soon(send_body)

        if error is not None:
            raise error
        if token.is_cancelled:
            return
        if sink.bytes_written < declared:
            log.debug("%s shrank while sending: %s of %s bytes", self.path, sink.bytes_written, declared)
        await sink.close()
