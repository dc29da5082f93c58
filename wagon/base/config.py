"""
Pydantic configuration models for transport providers.

Validates provider configs when a transport is created instead of
silently passing bad values to SDK clients. Credentials are not part of
the config: the host supplies them at connect time.
"""

from __future__ import annotations

import os
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, model_validator


DEFAULT_CHUNK_SIZE = 1024


class TransportConfig(BaseModel):
    """Settings shared by every transport provider."""

    model_config = ConfigDict(extra="forbid")

    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        gt=0,
        description="Bytes moved per read when streaming to or from storage",
    )


class S3Config(TransportConfig):
    """Configuration for the S3 transport.

    Values are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (AWS_DEFAULT_REGION, AWS_ENDPOINT_URL).
    3. If neither is set, fields are left as None so boto3 falls back to
       its own defaults.

    Without connect-time credentials requests are sent unsigned, unless
    ``use_default_credentials`` asks boto3 to walk its credential chain
    (instance metadata, ~/.aws/credentials, etc.).
    """

    region_name: str | None = Field(default=None, description="AWS region (e.g. 'us-east-1')")
    endpoint_url: str | None = Field(
        default=None, description="Custom endpoint for S3-compatible stores"
    )
    use_default_credentials: bool = Field(
        default=False, description="Use boto3's credential chain when none are supplied"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing settings."""
        env_map = {
            "region_name": "AWS_DEFAULT_REGION",
            "endpoint_url": "AWS_ENDPOINT_URL",
        }
        for field, env_var in env_map.items():
            if not values.get(field):
                values[field] = os.environ.get(env_var)
        return values


class GCSConfig(TransportConfig):
    """Configuration for the Google Cloud Storage transport.

    ``project_id`` falls back to GOOGLE_CLOUD_PROJECT / GCLOUD_PROJECT. A
    username supplied at connect time overrides it. Without connect-time
    credentials an anonymous client is used, unless
    ``use_default_credentials`` selects Application Default Credentials.
    """

    project_id: str | None = Field(default=None, description="GCP project ID")
    use_default_credentials: bool = Field(
        default=False, description="Use Application Default Credentials when none are supplied"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing config."""
        if not values.get("project_id"):
            values["project_id"] = os.environ.get("GOOGLE_CLOUD_PROJECT") or os.environ.get(
                "GCLOUD_PROJECT"
            )
        return values


# Map repository URL schemes to their config models for dynamic validation
CONFIG_REGISTRY: dict[str, type[TransportConfig]] = {
    "s3": S3Config,
    "gs": GCSConfig,
}


def validate_config(scheme: str, config: dict | None = None) -> TransportConfig:
    """Validate and return a typed config model for the given scheme.

    Args:
        scheme: Repository URL scheme (e.g. 's3', 'gs').
        config: Raw configuration dictionary.

    Returns:
        A validated Pydantic config model.

    Raises:
        ValueError: If the scheme is unknown.
        pydantic.ValidationError: If the config is invalid.
    """
    model = CONFIG_REGISTRY.get(scheme)
    if model is None:
        raise ValueError(f"No config model registered for scheme: {scheme}")
    return model(**(config or {}))


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "TransportConfig",
    "S3Config",
    "GCSConfig",
    "CONFIG_REGISTRY",
    "validate_config",
]
