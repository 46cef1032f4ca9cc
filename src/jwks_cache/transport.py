from __future__ import annotations

import http.client
import ssl
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Protocol

from .config import DEFAULT_MAX_RESPONSE_BYTES, DEFAULT_REQUEST_TIMEOUT, ClientConfig
from .errors import TransportError


@dataclass(frozen=True)
class HTTPResponse:
    status: int
    body: bytes = b""


class Transport(Protocol):
    """Performs one GET and reports the status and body.

    Implementations raise ``TransportError`` when no response was received.
    A response with an error status is returned, not raised.
    """

    def get(self, url: str) -> HTTPResponse: ...


def validate_endpoint(url: str) -> str:
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("JWKS url must be http(s)")
    return url


class HTTPTransport:
    """urllib-backed transport owning its own opener and TLS context."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        verify_tls: bool = True,
        max_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
    ) -> None:
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.max_bytes = max_bytes

        context = ssl.create_default_context()
        if not verify_tls:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        self._opener = urllib.request.build_opener(urllib.request.HTTPSHandler(context=context))

    @classmethod
    def from_config(cls, config: ClientConfig) -> HTTPTransport:
        return cls(
            timeout=config.request_timeout,
            verify_tls=config.verify_tls,
            max_bytes=config.max_response_bytes,
        )

    def get(self, url: str) -> HTTPResponse:
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            with self._opener.open(req, timeout=self.timeout) as response:
                status = int(response.status)
                body = response.read(self.max_bytes + 1)
                # Bytes still owed by Content-Length after the read; None when unsized.
                missing = getattr(response, "length", None)
        except urllib.error.HTTPError as exc:
            # Error statuses surface as exceptions in urllib; the body is not needed.
            exc.close()
            return HTTPResponse(status=exc.code)
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise TransportError(url, exc) from exc
        if len(body) > self.max_bytes:
            raise TransportError(url, ValueError("JWKS response too large"))
        if missing:
            raise TransportError(url, http.client.IncompleteRead(body, missing))
        return HTTPResponse(status=status, body=body)
