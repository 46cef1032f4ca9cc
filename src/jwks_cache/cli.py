from __future__ import annotations

import argparse
import json
import sys

from .client import JWKSClient
from .config import DEFAULT_REQUEST_TIMEOUT, ClientConfig, new_config
from .errors import JWKSError
from .models import key_set_to_dict
from .version import __version__


def _print_json(obj: object) -> None:
    print(json.dumps(obj, indent=2, sort_keys=True))


def _build_config(args: argparse.Namespace) -> ClientConfig:
    config = new_config().with_request_timeout(args.timeout)
    if args.insecure:
        config.with_tls_verification(False)
    if args.debug:
        config.with_debug_logging(True).with_error_logging(True)
    return config


def _cmd_keys(args: argparse.Namespace) -> int:
    client = JWKSClient(args.url, _build_config(args))
    _print_json(key_set_to_dict(client.get_keys()))
    return 0


def _cmd_signing_key(args: argparse.Namespace) -> int:
    client = JWKSClient(args.url, _build_config(args))
    key = client.get_signing_key(args.kid)
    if key is None:
        print(f"no signing key with kid {args.kid}", file=sys.stderr)
        return 1
    _print_json(key.to_dict())
    return 0


def _add_endpoint_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--url", required=True, help="JWKS endpoint URL (http or https)")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_REQUEST_TIMEOUT,
        help="Request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--insecure", action="store_true", help="Skip TLS certificate verification"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Log fetch progress and failures to stderr"
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="jwks-cache")
    parser.add_argument("--version", action="version", version=__version__)

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_keys = sub.add_parser("keys", help="Fetch and print the whole key set")
    _add_endpoint_args(p_keys)
    p_keys.set_defaults(func=_cmd_keys)

    p_signing = sub.add_parser("signing-key", help="Print the signing key (use=sig) for a kid")
    _add_endpoint_args(p_signing)
    p_signing.add_argument("--kid", required=True, help="Key ID to look up")
    p_signing.set_defaults(func=_cmd_signing_key)

    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except KeyboardInterrupt:
        return 130
    except (ValueError, JWKSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
