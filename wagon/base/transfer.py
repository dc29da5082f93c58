"""
Streaming helpers shared by every transport provider.

Covers chunked copying with progress reporting, stream wrappers that
report upload progress as the client library reads them, and the two
places where errors are intentionally suppressed: closing streams and
probing for existence.
"""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from typing import Any, BinaryIO, Callable, Iterator, TypeVar

from .logger import wg_logger

ProgressSink = Callable[[bytes], None]
"""Callback invoked with each chunk of bytes moved."""

T = TypeVar("T")


def best_effort_close(stream: Any) -> None:
    """Close *stream*, discarding any error raised while closing.

    Nothing useful can be done once a transfer has finished or failed, so
    close failures are logged at debug level and never reach the caller.
    """
    if stream is None:
        return
    try:
        stream.close()
    except Exception as exc:
        wg_logger.debug(f"Ignoring failure while closing stream: {exc}", operation="close")


@contextmanager
def quietly_closing(stream: T) -> Iterator[T]:
    """Like :func:`contextlib.closing`, but through :func:`best_effort_close`."""
    try:
        yield stream
    finally:
        best_effort_close(stream)


def existence_probe(
    fetch: Callable[[], object],
    errors: tuple[type[BaseException], ...],
    *,
    resource: str | None = None,
) -> bool:
    """Return True if *fetch* succeeds, False if it raises one of *errors*.

    Not-found, permission and transient failures all collapse into False;
    callers that need to tell them apart must fetch metadata themselves.
    """
    try:
        fetch()
    except errors as exc:
        wg_logger.debug(
            f"Existence probe failed, reporting missing: {exc}",
            operation="exists",
            resource=resource,
        )
        return False
    return True


def copy_stream(
    source: BinaryIO,
    target: BinaryIO,
    chunk_size: int,
    progress: ProgressSink | None = None,
) -> int:
    """Copy *source* into *target* in *chunk_size* reads.

    Args:
        source: Readable binary stream.
        target: Writable binary stream.
        chunk_size: Maximum bytes per read.
        progress: Optional sink called with every chunk written.

    Returns:
        Total number of bytes copied.
    """
    total = 0
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            return total
        target.write(chunk)
        total += len(chunk)
        if progress is not None:
            progress(chunk)


class ProgressReader:
    """Readable wrapper that reports bytes to a sink as they are consumed.

    Client libraries may read an upload body more than once (for example to
    compute a checksum, then to send it). Each byte offset is reported at
    most once, so the sink sees the file exactly one time in total.
    """

    def __init__(self, stream: BinaryIO, progress: ProgressSink) -> None:
        self._stream = stream
        self._progress = progress
        self._reported = 0

    def read(self, size: int = -1) -> bytes:
        start = self._stream.tell()
        chunk = self._stream.read(size)
        end = start + len(chunk)
        if end > self._reported:
            fresh = chunk[max(self._reported - start, 0):]
            self._reported = end
            self._progress(fresh)
        return chunk

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._stream.seek(offset, whence)

    def tell(self) -> int:
        return self._stream.tell()

    def seekable(self) -> bool:
        return True

    def readable(self) -> bool:
        return True

    def close(self) -> None:
        self._stream.close()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._stream, name)


class TransferProgress:
    """Progress sink that counts bytes and logs each chunk at debug level.

    Attributes:
        resource: Resource being transferred.
        total: Expected size in bytes, when known.
        transferred: Bytes reported so far.
    """

    def __init__(self, resource: str, total: int | None = None) -> None:
        self.resource = resource
        self.total = total
        self.transferred = 0

    def __call__(self, chunk: bytes) -> None:
        self.transferred += len(chunk)
        if wg_logger.logger.isEnabledFor(logging.DEBUG):
            wg_logger.debug(
                f"{self.transferred}/{self.total if self.total is not None else '?'} bytes",
                operation="progress",
                resource=self.resource,
            )

    @property
    def fraction(self) -> float | None:
        """Share of the transfer done, or None when the size is unknown."""
        if not self.total:
            return None
        return min(self.transferred / self.total, 1.0)
