"""Wagon CLI: ad-hoc artifact transfers from the command line.

Usage examples::

    wagon --url s3://my-bucket/releases list com/example/
    wagon --url s3://my-bucket/releases -u AKIA... -P secret put app.jar com/example/app.jar
    wagon --url gs://my-bucket/releases get com/example/app.jar ./app.jar
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any

_OPERATIONS = ["exists", "get", "put", "list", "is-newer", "get-if-newer"]


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``wagon`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="wagon",
        description="Artifact transfers against object-storage repositories",
    )
    parser.add_argument(
        "--url",
        required=True,
        help="Repository URL (e.g. s3://bucket-name/base/path)",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON config string (e.g. \'{"region_name":"us-east-1"}\')',
    )
    parser.add_argument(
        "--username", "-u",
        default=os.environ.get("WAGON_USERNAME"),
        help="Repository username (default: $WAGON_USERNAME)",
    )
    parser.add_argument(
        "--passphrase", "-P",
        default=os.environ.get("WAGON_PASSPHRASE"),
        help="Repository passphrase (default: $WAGON_PASSPHRASE)",
    )
    parser.add_argument(
        "operation",
        choices=_OPERATIONS,
        help="Transport operation to perform",
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="Positional arguments for the operation",
    )
    return parser


def _run(transport: Any, operation: str, args: list[str]) -> Any:
    from wagon.base import TransferProgress, get_if_newer

    if operation == "exists":
        (resource,) = args
        return transport.exists(resource)
    if operation == "list":
        (directory,) = args or [""]
        return transport.list(directory)
    if operation == "get":
        resource, destination = args
        transport.get(resource, destination, TransferProgress(resource))
        return None
    if operation == "put":
        source, destination = args
        transport.put(source, destination, TransferProgress(destination, os.path.getsize(source)))
        return None
    if operation == "is-newer":
        resource, timestamp = args
        return transport.is_newer(resource, int(timestamp))
    resource, destination, timestamp = args
    return get_if_newer(transport, resource, destination, int(timestamp), TransferProgress(resource))


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, builds a transport from the repository URL, connects
    for the duration of one operation, and prints the result as JSON
    (lists/booleans) or ``OK``.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    try:
        config: dict[str, Any] = json.loads(ns.config)
    except json.JSONDecodeError as e:
        print(f"Invalid --config JSON: {e}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(config, dict):
        print("Invalid --config JSON: expected an object", file=sys.stderr)
        sys.exit(1)

    # Lazy-import to avoid loading all SDKs unconditionally
    from wagon.base import AuthenticationInfo, connected
    from wagon.base.exceptions import WagonError
    from wagon.factory import transport_for

    try:
        transport, repository = transport_for(ns.url, config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    authentication = None
    if ns.username or ns.passphrase:
        authentication = AuthenticationInfo(username=ns.username, passphrase=ns.passphrase)
    try:
        with connected(transport, repository, authentication):
            result = _run(transport, ns.operation, ns.args)
    except ValueError:
        print(f"Invalid arguments for '{ns.operation}'", file=sys.stderr)
        sys.exit(1)
    except (WagonError, OSError) as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(1)

    # Pretty-print result
    if result is None:
        print("OK")
    else:
        print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
