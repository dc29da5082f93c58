"""Repository and authentication descriptors handed over by the host."""

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import AuthenticationError


SEPARATOR = "/"


class AuthenticationInfo(BaseModel):
    """Username / passphrase pair for a repository.

    Both fields are optional; what they mean depends on the provider
    (access key and secret for S3, project and key file for GCS).
    """

    model_config = ConfigDict(frozen=True)

    username: str | None = None
    passphrase: str | None = Field(default=None, repr=False)


class Repository(BaseModel):
    """A remote repository of the form ``scheme://bucket-name/optional/base/path``."""

    model_config = ConfigDict(frozen=True)

    url: str
    id: str = "remote"

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Repository URL must look like scheme://bucket/path, got '{value}'")
        return value

    @property
    def protocol(self) -> str:
        return urlsplit(self.url).scheme.lower()

    @property
    def host(self) -> str:
        """Bucket name."""
        return urlsplit(self.url).netloc

    @property
    def basedir(self) -> str:
        """URL path below the bucket, ``/`` when the URL has none."""
        return urlsplit(self.url).path or SEPARATOR


def base_path(basedir: str) -> str:
    """Turn a repository base directory into a key prefix.

    Leading separators are dropped and exactly one trailing separator is
    kept. A root base directory maps to the empty prefix so keys land at
    the top of the bucket.
    """
    stripped = basedir.strip(SEPARATOR)
    if not stripped:
        return ""
    return stripped + SEPARATOR


def resolve_credentials(authentication: AuthenticationInfo | None) -> tuple[str, str] | None:
    """Return the ``(username, passphrase)`` pair, or None for anonymous access.

    Raises:
        AuthenticationError: If credentials are supplied without both values.
    """
    if authentication is None:
        return None
    username, passphrase = authentication.username, authentication.passphrase
    if not username or not passphrase:
        raise AuthenticationError("Object storage requires both a username and a passphrase to be set")
    return username, passphrase


def parent_markers(destination: str) -> list[str]:
    """Directory marker paths for every parent of *destination*, root first.

    ``"a/b/c.txt"`` yields ``["a/", "a/b/"]``; a top-level name yields none.
    Every marker is a literal prefix of *destination*, so empty segments
    (``"a//b"``) keep their doubled separator.
    """
    return [destination[: i + 1] for i, char in enumerate(destination) if char == SEPARATOR]
