# linkserve/file_content/responders.py
"""
File responders: write a file result's body to a response sink.

Two variants share one `write_file` signature:

- `DefaultFileResponder` trusts `os.stat()` and is right for ordinary files.
- `SymlinkFollowingFileResponder` handles links, whose directory-entry
  size may not match what a read returns. It re-measures the target and
  copies through `send_range`, and hands everything else to its fallback.

`select_responder(path)` picks one per request.
"""
from __future__ import annotations
import logging
from typing import Optional, Protocol, Tuple

import anyio

from .copier import buffer_size, copy_stream, open_for_copy, send_range
from .metadata import PathLike, is_symbolic_link
from .models import ByteRange, FileResult, ResponseContext

log = logging.getLogger(__name__)


class FileResponder(Protocol):
    async def write_file(
        self,
        context: ResponseContext,
        result: FileResult,
        byte_range: Optional[ByteRange],
        range_length: int,
    ) -> None: ...


def _window(byte_range: Optional[ByteRange], range_length: int) -> Tuple[int, Optional[int]]:
    if byte_range is None:
        return 0, None
    return byte_range.start, range_length


def _require(context: Optional[ResponseContext], result: Optional[FileResult]) -> None:
    if context is None:
        raise ValueError("context is required")
    if result is None:
        raise ValueError("result is required")


class DefaultFileResponder:
    async def write_file(
        self,
        context: ResponseContext,
        result: FileResult,
        byte_range: Optional[ByteRange],
        range_length: int,
    ) -> None:
        _require(context, result)
        if byte_range is not None and range_length == 0:
            return
        offset, count = _window(byte_range, range_length)
        bufsize = buffer_size()
        async with await open_for_copy(result.path, bufsize) as f:
            await copy_stream(f, context.sink, offset, count, bufsize, context.cancel)


class SymlinkFollowingFileResponder:
    def __init__(self, fallback: Optional[FileResponder] = None):
        self.fallback = fallback or DefaultFileResponder()

    async def write_file(
        self,
        context: ResponseContext,
        result: FileResult,
        byte_range: Optional[ByteRange],
        range_length: int,
    ) -> None:
        _require(context, result)

        if byte_range is not None and range_length == 0:
            log.debug("empty range for %s, nothing to send", result.path)
            return

        # Repeats the lstat done by select_responder(); ordinary files
        # should not pay for the link path.
        if not await anyio.to_thread.run_sync(is_symbolic_link, result.path):
            log.debug("%s is not a link, using %s", result.path, type(self.fallback).__name__)
            await self.fallback.write_file(context, result, byte_range, range_length)
            return

        offset, count = _window(byte_range, range_length)
        log.debug("sending link %s offset=%s count=%s", result.path, offset, count)
        await send_range(result.path, context.sink, offset, count, cancel=context.cancel)


default_responder = DefaultFileResponder()
link_responder = SymlinkFollowingFileResponder(fallback=default_responder)


def select_responder(path: PathLike) -> FileResponder:
    if is_symbolic_link(path):
        return link_responder
    return default_responder
