"""
Session state and lifecycle helpers.

Transports hold a :class:`Session` while connected. The helpers here
carry the lifecycle plumbing every transport shares, so providers only
implement the protocol instead of extending a base class.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, TypeVar

from .exceptions import NotConnectedError
from .logger import wg_logger
from .repository import AuthenticationInfo, Repository
from .transfer import ProgressSink
from .transport import TransportProvider

TransportT = TypeVar("TransportT", bound=TransportProvider)


@dataclass
class Session:
    """An open connection to one bucket.

    Attributes:
        client: Authenticated storage client handle.
        bucket: Bucket name or provider bucket handle.
        basedir: Key prefix, empty or ending with a separator.
        repository: Repository the session was opened for.
    """

    client: Any
    bucket: Any
    basedir: str
    repository: Repository

    def key(self, resource_name: str) -> str:
        return self.basedir + resource_name


def require_session(session: Session | None, operation: str) -> Session:
    """Return *session*, or raise if the transport is not connected."""
    if session is None:
        raise NotConnectedError(f"Cannot {operation}: transport is not connected.")
    return session


def epoch_millis(moment: datetime) -> int:
    """Milliseconds since the epoch; naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


@contextmanager
def connected(
    transport: TransportT,
    repository: Repository,
    authentication: AuthenticationInfo | None = None,
) -> Iterator[TransportT]:
    """Connect *transport* for the duration of a ``with`` block.

    The transport is always disconnected on exit, including when the
    block raises.
    """
    transport.connect(repository, authentication)
    try:
        yield transport
    finally:
        transport.disconnect()


def get_if_newer(
    transport: TransportProvider,
    resource_name: str,
    destination: str | Path,
    timestamp: int,
    progress: ProgressSink | None = None,
) -> bool:
    """Download *resource_name* only if the remote copy changed after *timestamp*.

    Args:
        transport: A connected transport.
        resource_name: Resource path relative to the repository base.
        destination: Local file to write.
        timestamp: Local copy's modification time in epoch milliseconds.
        progress: Optional sink for downloaded chunks.

    Returns:
        True if the resource was downloaded.
    """
    if not transport.is_newer(resource_name, timestamp):
        wg_logger.info(
            "Remote resource is not newer, skipping download",
            operation="get_if_newer",
            resource=resource_name,
        )
        return False
    transport.get(resource_name, destination, progress)
    return True
