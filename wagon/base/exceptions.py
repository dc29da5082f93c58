"""
Wagon exception hierarchy.

Every transport failure surfaces as a subclass of :class:`WagonError`.
Client-library exceptions are chained as ``__cause__`` so the original
error is never lost. Local filesystem failures are not wrapped: they
propagate as the builtin :class:`OSError`.
"""


# ── Base ──────────────────────────────────────────────────────────────
class WagonError(Exception):
    """Root exception for all Wagon errors."""


# ── Session ───────────────────────────────────────────────────────────
class AuthenticationError(WagonError):
    """Credentials are incomplete or were rejected by the storage client."""


class NotConnectedError(WagonError):
    """A transfer operation was called without an open session."""


# ── Storage ───────────────────────────────────────────────────────────
class StorageClientError(WagonError):
    """Generic object-storage client failure."""


class ResourceNotFoundError(StorageClientError):
    """Remote resource does not exist or cannot be fetched."""
