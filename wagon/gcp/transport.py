"""GCP Cloud Storage implementation of the transport provider."""

from __future__ import annotations

from pathlib import Path

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage as gcs
from google.oauth2 import service_account

from wagon.base.config import GCSConfig
from wagon.base.exceptions import (
    AuthenticationError,
    ResourceNotFoundError,
    StorageClientError,
)
from wagon.base.logger import wg_logger
from wagon.base.repository import (
    AuthenticationInfo,
    Repository,
    base_path,
    parent_markers,
    resolve_credentials,
)
from wagon.base.session import Session, epoch_millis, require_session
from wagon.base.transfer import (
    ProgressReader,
    ProgressSink,
    copy_stream,
    existence_probe,
    quietly_closing,
)

_CLIENT_ERRORS = (GoogleAPIError, GoogleAuthError)


class GCSTransport:
    """Transport provider backed by a Cloud Storage bucket.

    Repository URLs take the form ``gs://bucket-name/optional/base/path``.
    The username names the GCP project and the passphrase is the path to a
    service-account JSON key file.
    """

    provider = "gs"

    def __init__(self, config: GCSConfig | None = None) -> None:
        self.config = config or GCSConfig()
        self.session: Session | None = None

    def _create_client(self, credentials: tuple[str, str] | None):
        if credentials is not None:
            project_id, key_file = credentials
            return gcs.Client(
                project=project_id,
                credentials=service_account.Credentials.from_service_account_file(key_file),
            )
        if self.config.use_default_credentials:
            return gcs.Client(project=self.config.project_id)
        return gcs.Client.create_anonymous_client()

    def _log(self, message: str, operation: str, resource: str | None = None) -> None:
        wg_logger.info(
            message,
            provider=self.provider,
            repository=self.session.repository.url if self.session else None,
            operation=operation,
            resource=resource,
        )

    def connect(
        self, repository: Repository, authentication: AuthenticationInfo | None = None
    ) -> None:
        """Open a Cloud Storage session for *repository*.

        Raises:
            AuthenticationError: If only one of username / passphrase is set,
                or the key file cannot be loaded.
        """
        credentials = resolve_credentials(authentication)
        try:
            client = self._create_client(credentials)
        except (GoogleAuthError, OSError, ValueError) as e:
            raise AuthenticationError("Cannot authenticate with current credentials") from e
        self.session = Session(
            client=client,
            bucket=client.bucket(repository.host),
            basedir=base_path(repository.basedir),
            repository=repository,
        )
        self._log(f"Connected to bucket '{repository.host}'", "connect")

    def disconnect(self) -> None:
        if self.session is not None:
            self._log("Disconnected", "disconnect")
        self.session = None

    def exists(self, resource_name: str) -> bool:
        """Return True if the blob's metadata can be fetched."""
        session = require_session(self.session, "exists")
        blob = session.bucket.blob(session.key(resource_name))
        return existence_probe(blob.reload, _CLIENT_ERRORS, resource=resource_name)

    def get(
        self,
        resource_name: str,
        destination: str | Path,
        progress: ProgressSink | None = None,
    ) -> None:
        """Download a blob to a local file, creating parent directories."""
        session = require_session(self.session, "get")
        try:
            blob = session.bucket.get_blob(session.key(resource_name))
        except _CLIENT_ERRORS as e:
            raise ResourceNotFoundError(
                f"Resource '{resource_name}' does not exist in the repository."
            ) from e
        if blob is None:
            raise ResourceNotFoundError(
                f"Resource '{resource_name}' does not exist in the repository."
            )

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with quietly_closing(blob.open("rb")) as reader, quietly_closing(
                destination.open("wb")
            ) as out:
                size = copy_stream(reader, out, self.config.chunk_size, progress)
        except _CLIENT_ERRORS as e:
            raise StorageClientError(f"Failed to download '{resource_name}'.") from e
        self._log(f"Downloaded {size} bytes to '{destination}'", "get", resource_name)

    def put(
        self,
        source: str | Path,
        destination: str,
        progress: ProgressSink | None = None,
    ) -> None:
        """Upload a local file, creating directory markers for its parents."""
        session = require_session(self.session, "put")
        source = Path(source)
        size = source.stat().st_size
        try:
            for marker in parent_markers(destination):
                session.bucket.blob(session.key(marker)).upload_from_string(b"")
            with quietly_closing(source.open("rb")) as stream:
                body = ProgressReader(stream, progress) if progress is not None else stream
                session.bucket.blob(session.key(destination)).upload_from_file(body, size=size)
        except _CLIENT_ERRORS as e:
            raise StorageClientError(
                f"Failed to upload '{destination}' to '{session.repository.host}'."
            ) from e
        self._log(f"Uploaded {size} bytes from '{source}'", "put", destination)

    def is_newer(self, resource_name: str, timestamp: int) -> bool:
        """Return True if the blob was last updated after *timestamp* (epoch ms)."""
        session = require_session(self.session, "is_newer")
        try:
            blob = session.bucket.get_blob(session.key(resource_name))
        except _CLIENT_ERRORS as e:
            raise StorageClientError(f"Failed to fetch metadata for '{resource_name}'.") from e
        if blob is None:
            raise ResourceNotFoundError(f"Resource '{resource_name}' does not exist in the repository.")
        return epoch_millis(blob.updated) > timestamp

    def list(self, directory: str) -> list[str]:
        """List every blob name under *directory*, recursively and unrelativized."""
        session = require_session(self.session, "list")
        try:
            return [
                blob.name
                for blob in session.client.list_blobs(session.bucket, prefix=session.key(directory))
            ]
        except _CLIENT_ERRORS as e:
            raise StorageClientError(
                f"Failed to list '{directory}' in '{session.repository.host}'."
            ) from e