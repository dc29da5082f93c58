"""AWS provider: S3 transport built on boto3."""

from .transport import S3Transport

__all__ = ["S3Transport"]
