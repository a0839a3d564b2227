# linkserve/file_content/copier.py
from __future__ import annotations
import logging
import os
from typing import Optional

import anyio
from anyio import AsyncFile

from linkserve.config import settings
from .cancellation import CancellationToken
from .errors import CopyError, RangeNotSatisfiableError
from .metadata import PathLike, resolve
from .models import FileMetadata, RangeRequest
from .sinks import Sink

log = logging.getLogger(__name__)


def buffer_size(bufsize: Optional[int] = None) -> int:
    if bufsize is None:
        bufsize = settings.file_buffer_size
    if bufsize <= 0:
        raise ValueError(f"buffer size must be positive, got {bufsize}")
    return bufsize


def validate_window(meta: FileMetadata, offset: int, count: Optional[int]) -> None:
    if offset < 0 or offset > meta.length:
        raise RangeNotSatisfiableError("offset", offset, meta.length)
    if count is not None and (count < 0 or count > meta.length - offset):
        raise RangeNotSatisfiableError("count", count, meta.length)


def _advise_sequential(fd: int) -> None:
    # Read-ahead hint; not every platform has posix_fadvise.
    fadvise = getattr(os, "posix_fadvise", None)
    if fadvise is None:
        return
    try:
        fadvise(fd, 0, 0, os.POSIX_FADV_SEQUENTIAL)
    except OSError:
        pass


async def open_for_copy(path: PathLike, bufsize: int) -> AsyncFile:
    """Open read-only; other readers and writers are not locked out."""
    f = await anyio.open_file(path, "rb", buffering=bufsize)
    _advise_sequential(f.wrapped.fileno())
    return f


async def copy_stream(
    f: AsyncFile,
    destination: Sink,
    offset: int,
    count: Optional[int],
    bufsize: int,
    cancel: Optional[CancellationToken] = None,
) -> int:
    """
    Seek to `offset` and move up to `count` bytes (all of them when
    None) from `f` to `destination`, one buffer at a time. Stops early at
    end of stream.
    """
    try:
        await f.seek(offset, os.SEEK_SET)
    except OSError as exc:
        raise CopyError(f"seek to {offset} failed: {exc}") from exc

    copied = 0
    remaining = count
    while remaining is None or remaining > 0:
        if cancel is not None:
            cancel.check()
        read_size = bufsize if remaining is None else min(bufsize, remaining)
        try:
            chunk = await f.read(read_size)
        except OSError as exc:
            raise CopyError(f"read failed after {copied} bytes: {exc}") from exc
        if not chunk:
            break
        try:
            await destination.write(chunk)
        except OSError as exc:
            raise CopyError(f"write failed after {copied} bytes: {exc}") from exc
        copied += len(chunk)
        if remaining is not None:
            remaining -= len(chunk)
    return copied


async def send_range(
    path: PathLike,
    destination: Sink,
    offset: int = 0,
    count: Optional[int] = None,
    *,
    cancel: Optional[CancellationToken] = None,
    bufsize: Optional[int] = None,
) -> int:
    """
    Copy bytes [offset, offset+count) of `path` (or [offset, EOF) when
    `count` is None) into `destination`. Returns the number of bytes copied.

    The window is checked against a fresh `resolve()` taken right before
    the file is opened, never against a length computed earlier by the
    caller. Bytes already written are not retracted on failure.

    Raises:
        RangeNotSatisfiableError: window outside [0, length]; nothing is written.
        CopyCancelledError: `cancel` fired; the handle is released.
        CopyError: a seek, read or write failed mid-copy.
        OSError: the file could not be opened.
        ValueError: `bufsize` (or FILE_BUFFER_SIZE) is not positive.
    """
    bufsize = buffer_size(bufsize)
    meta = await anyio.to_thread.run_sync(resolve, path)
    validate_window(meta, offset, count)

    async with await open_for_copy(path, bufsize) as f:
        copied = await copy_stream(f, destination, offset, count, bufsize, cancel)

    log.debug("copied %s bytes from %s at offset %s", copied, path, offset)
    return copied


async def send_request(
    req: RangeRequest,
    destination: Sink,
    *,
    cancel: Optional[CancellationToken] = None,
) -> int:
    return await send_range(req.path, destination, req.offset, req.count, cancel=cancel)
