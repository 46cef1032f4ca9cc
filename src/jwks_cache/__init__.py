from .client import JWKSClient
from .config import ClientConfig, new_config
from .errors import (
    FetchError,
    JWKSError,
    ParseError,
    RefreshError,
    StatusError,
    TransportError,
)
from .models import Key, KeySet, parse_key_set
from .store import CacheEntry, KeyStore
from .transport import HTTPResponse, HTTPTransport, Transport
from .version import __version__

__all__ = [
    "CacheEntry",
    "ClientConfig",
    "FetchError",
    "HTTPResponse",
    "HTTPTransport",
    "JWKSClient",
    "JWKSError",
    "Key",
    "KeySet",
    "KeyStore",
    "ParseError",
    "RefreshError",
    "StatusError",
    "Transport",
    "TransportError",
    "__version__",
    "new_config",
    "parse_key_set",
]
