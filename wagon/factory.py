"""Transport factory.

Provides :func:`transport_factory`, the single entry-point for creating
transport providers. The function dispatches on the repository URL
scheme and returns a typed instance via ``@overload`` signatures so IDEs
can autocomplete methods.
"""

from typing import overload, Literal, Any

from wagon.base import Repository, TransportProvider, existing_schemes
from wagon.base.config import validate_config
from wagon.aws.transport import S3Transport
from wagon.gcp.transport import GCSTransport


# Scheme registry: repository URL scheme -> transport class
_TRANSPORT_REGISTRY: dict[str, type] = {
    "s3": S3Transport,
    "gs": GCSTransport,
}


@overload
def transport_factory(scheme: Literal["s3"], config: dict | None = None) -> S3Transport: ...


@overload
def transport_factory(scheme: Literal["gs"], config: dict | None = None) -> GCSTransport: ...


def transport_factory(scheme: existing_schemes, config: dict | None = None) -> Any:
    """
    Create a transport provider for a repository URL scheme.
    Args:
        scheme: The URL scheme (e.g. 's3', 'gs').
        config: Configuration dictionary validated against the scheme's model.
    Returns:
        An unconnected transport instance.
    Raises:
        ValueError: If the scheme is not supported.
        pydantic.ValidationError: If the config is invalid.
    """
    if scheme not in _TRANSPORT_REGISTRY:
        raise ValueError(f"Unsupported repository scheme: {scheme}")

    transport_class = _TRANSPORT_REGISTRY[scheme]
    configObj = validate_config(scheme, config)
    return transport_class(configObj)


def transport_for(
    url: str, config: dict | None = None, repository_id: str = "remote"
) -> tuple[TransportProvider, Repository]:
    """Parse *url* and build the matching transport.

    Args:
        url: Repository URL, ``scheme://bucket-name/optional/base/path``.
        config: Optional transport configuration dictionary.
        repository_id: Identifier recorded on the repository descriptor.

    Returns:
        ``(transport, repository)``, ready for :func:`wagon.connected`.
    """
    repository = Repository(url=url, id=repository_id)
    return transport_factory(repository.protocol, config), repository
