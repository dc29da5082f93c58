"""Wagon: object-storage transport provider for build-artifact repositories.

Entry point for the library. Import :func:`transport_for` to get a
transport and its repository descriptor from a single URL::

    from wagon import connected, transport_for

    transport, repository = transport_for("s3://my-bucket/releases")
    with connected(transport, repository):
        transport.put("build/app-1.0.jar", "com/example/app/1.0/app-1.0.jar")
"""

from .base import (
    TransportProvider,
    AuthenticationInfo,
    Repository,
    TransferProgress,
    connected,
    get_if_newer,
)
from .factory import transport_factory, transport_for

__all__ = [
    "TransportProvider",
    "AuthenticationInfo",
    "Repository",
    "TransferProgress",
    "connected",
    "get_if_newer",
    "transport_factory",
    "transport_for",
]
