"""Transport provider capability interface."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from .repository import AuthenticationInfo, Repository
from .transfer import ProgressSink


@runtime_checkable
class TransportProvider(Protocol):
    """Operations a host build tool drives against an artifact repository.

    The host calls :meth:`connect`, then any sequence of :meth:`exists`,
    :meth:`get`, :meth:`put`, :meth:`list` and :meth:`is_newer`, then
    :meth:`disconnect`. Transfer operations raise
    :class:`~wagon.base.exceptions.NotConnectedError` outside that window.
    Instances are not safe for concurrent use.
    """

    def connect(
        self, repository: Repository, authentication: AuthenticationInfo | None = None
    ) -> None:
        """Open a session against *repository*.

        Args:
            repository: Target repository; its host names the bucket and
                its path the base prefix.
            authentication: Optional credentials. Anonymous when omitted.

        Raises:
            AuthenticationError: If credentials are partial or rejected.
        """
        ...

    def disconnect(self) -> None:
        """Discard the session."""
        ...

    def exists(self, resource_name: str) -> bool:
        """Return True if metadata for the resource can be fetched."""
        ...

    def get(
        self,
        resource_name: str,
        destination: str | Path,
        progress: ProgressSink | None = None,
    ) -> None:
        """Download a resource into *destination*, creating parent directories.

        Raises:
            ResourceNotFoundError: If the object cannot be retrieved.
        """
        ...

    def put(
        self,
        source: str | Path,
        destination: str,
        progress: ProgressSink | None = None,
    ) -> None:
        """Upload *source* as *destination*, creating parent directory markers."""
        ...

    def is_newer(self, resource_name: str, timestamp: int) -> bool:
        """Return True if the remote object was modified after *timestamp* (epoch ms)."""
        ...

    def list(self, directory: str) -> list[str]:
        """Return every full key under *directory*, in storage order."""
        ...
