"""GCP provider: Cloud Storage transport built on google-cloud-storage."""

from .transport import GCSTransport

__all__ = ["GCSTransport"]
