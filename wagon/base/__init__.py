"""Transport interface and core utilities.

Every storage provider implements :class:`TransportProvider`. Import the
helpers here to drive a transport or to write your own provider.
"""

from .transport import TransportProvider
from .repository import AuthenticationInfo, Repository, base_path
from .session import Session, connected, get_if_newer
from .transfer import ProgressSink, TransferProgress
from .supported_schemes import existing_schemes


__all__ = [
    "TransportProvider",
    "AuthenticationInfo",
    "Repository",
    "base_path",
    "Session",
    "connected",
    "get_if_newer",
    "ProgressSink",
    "TransferProgress",
    "existing_schemes",
]
