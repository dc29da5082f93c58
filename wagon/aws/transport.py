"""AWS S3 implementation of the transport provider."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import boto3
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from wagon.base.config import S3Config
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

_ERROR_MAP = {
    "NoSuchKey": ResourceNotFoundError,
    "NotFound": ResourceNotFoundError,
    "404": ResourceNotFoundError,
    "InvalidAccessKeyId": AuthenticationError,
    "SignatureDoesNotMatch": AuthenticationError,
}


def _handle_client_error(e: ClientError, message: str) -> NoReturn:
    """Raise a mapped exception or a generic StorageClientError."""
    exc_class = _ERROR_MAP.get(e.response["Error"]["Code"])
    raise (exc_class or StorageClientError)(message) from e


class S3Transport:
    """Transport provider backed by an S3 bucket.

    Repository URLs take the form ``s3://bucket-name/optional/base/path``.
    The username and passphrase of the authentication info are used as the
    access key id and secret access key.

    Attributes:
        config: Validated S3 settings.
        session: Open session, or None while disconnected.
    """

    provider = "s3"

    def __init__(self, config: S3Config | None = None) -> None:
        self.config = config or S3Config()
        self.session: Session | None = None

    def _create_client(self, credentials: tuple[str, str] | None):
        kwargs: dict = {
            "region_name": self.config.region_name,
            "endpoint_url": self.config.endpoint_url,
        }
        if credentials is not None:
            kwargs["aws_access_key_id"], kwargs["aws_secret_access_key"] = credentials
        elif not self.config.use_default_credentials:
            kwargs["config"] = Config(signature_version=UNSIGNED)
        return boto3.client("s3", **kwargs)

    def _log(self, message: str, operation: str, resource: str | None = None) -> None:
        wg_logger.info(
            message,
            provider=self.provider,
            repository=self.session.repository.url if self.session else None,
            operation=operation,
            resource=resource,
        )

    # --- Lifecycle ---

    def connect(
        self, repository: Repository, authentication: AuthenticationInfo | None = None
    ) -> None:
        """Open an S3 session for *repository*.

        Raises:
            AuthenticationError: If only one of username / passphrase is set,
                or boto3 refuses to build a client from them.
        """
        credentials = resolve_credentials(authentication)
        try:
            client = self._create_client(credentials)
        except (BotoCoreError, ValueError) as e:
            raise AuthenticationError("Cannot authenticate with current credentials") from e
        self.session = Session(
            client=client,
            bucket=repository.host,
            basedir=base_path(repository.basedir),
            repository=repository,
        )
        self._log(f"Connected to bucket '{repository.host}'", "connect")

    def disconnect(self) -> None:
        if self.session is not None:
            self._log("Disconnected", "disconnect")
        self.session = None

    # --- Transfer operations ---

    def exists(self, resource_name: str) -> bool:
        """Return True if the object's metadata can be fetched.

        Every client failure reads as False, including access-denied and
        transient network errors.
        """
        session = require_session(self.session, "exists")
        return existence_probe(
            lambda: session.client.head_object(
                Bucket=session.bucket, Key=session.key(resource_name)
            ),
            (ClientError, BotoCoreError),
            resource=resource_name,
        )

    def get(
        self,
        resource_name: str,
        destination: str | Path,
        progress: ProgressSink | None = None,
    ) -> None:
        """Download an object to a local file.

        Args:
            resource_name: Resource path relative to the repository base.
            destination: Local file to write; parent directories are created.
            progress: Optional sink called with each chunk written.

        Raises:
            ResourceNotFoundError: If the object cannot be retrieved.
            StorageClientError: If the stream fails mid-transfer.
        """
        session = require_session(self.session, "get")
        try:
            response = session.client.get_object(
                Bucket=session.bucket, Key=session.key(resource_name)
            )
        except (ClientError, BotoCoreError) as e:
            raise ResourceNotFoundError(
                f"Resource '{resource_name}' does not exist in the repository."
            ) from e

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with quietly_closing(response["Body"]) as body, quietly_closing(
                destination.open("wb")
            ) as out:
                size = copy_stream(body, out, self.config.chunk_size, progress)
        except BotoCoreError as e:
            raise StorageClientError(f"Failed to download '{resource_name}'.") from e
        self._log(f"Downloaded {size} bytes to '{destination}'", "get", resource_name)

    def put(
        self,
        source: str | Path,
        destination: str,
        progress: ProgressSink | None = None,
    ) -> None:
        """Upload a local file, creating directory markers for its parents.

        Args:
            source: Local file to upload.
            destination: Resource path relative to the repository base.
            progress: Optional sink called with each chunk as boto3 reads it.

        Raises:
            StorageClientError: If a marker or the object cannot be written.
        """
        session = require_session(self.session, "put")
        source = Path(source)
        size = source.stat().st_size
        try:
            for marker in parent_markers(destination):
                session.client.put_object(
                    Bucket=session.bucket, Key=session.key(marker), Body=b"", ContentLength=0
                )
            with quietly_closing(source.open("rb")) as stream:
                body = ProgressReader(stream, progress) if progress is not None else stream
                session.client.put_object(
                    Bucket=session.bucket,
                    Key=session.key(destination),
                    Body=body,
                    ContentLength=size,
                )
        except ClientError as e:
            _handle_client_error(e, f"Failed to upload '{destination}' to '{session.bucket}'.")
        except BotoCoreError as e:
            raise StorageClientError(
                f"Failed to upload '{destination}' to '{session.bucket}'."
            ) from e
        self._log(f"Uploaded {size} bytes from '{source}'", "put", destination)

    def is_newer(self, resource_name: str, timestamp: int) -> bool:
        """Return True if the object was last modified after *timestamp*.

        Args:
            resource_name: Resource path relative to the repository base.
            timestamp: Epoch milliseconds to compare against.

        Raises:
            ResourceNotFoundError: If the object does not exist.
            StorageClientError: If metadata cannot be fetched.
        """
        session = require_session(self.session, "is_newer")
        try:
            response = session.client.head_object(
                Bucket=session.bucket, Key=session.key(resource_name)
            )
        except ClientError as e:
            _handle_client_error(e, f"Failed to fetch metadata for '{resource_name}'.")
        except BotoCoreError as e:
            raise StorageClientError(f"Failed to fetch metadata for '{resource_name}'.") from e
        return epoch_millis(response["LastModified"]) > timestamp

    def list(self, directory: str) -> list[str]:
        """List every key under *directory*, recursively and unrelativized.

        Handles pagination automatically to return all matching keys.

        Raises:
            StorageClientError: If listing fails.
        """
        session = require_session(self.session, "list")
        try:
            keys = []
            paginator = session.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=session.bucket, Prefix=session.key(directory)):
                keys.extend(obj["Key"] for obj in page.get("Contents", []))
            return keys
        except ClientError as e:
            _handle_client_error(e, f"Failed to list '{directory}' in '{session.bucket}'.")
        except BotoCoreError as e:
            raise StorageClientError(f"Failed to list '{directory}' in '{session.bucket}'.") from e
