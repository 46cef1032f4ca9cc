from __future__ import annotations


class JWKSError(Exception):
    """Base class for every error raised while obtaining a key set."""


class FetchError(JWKSError):
    """The key set endpoint could not be read."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class TransportError(FetchError):
    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"request to {url} failed: {cause}", url=url)
        self.cause = cause


class StatusError(FetchError):
    def __init__(self, url: str, status: int) -> None:
        super().__init__(f"keys request returned non-success status ({status})", url=url)
        self.status = status


class ParseError(JWKSError):
    """The response body is not a well-formed key set."""


class RefreshError(JWKSError):
    """An unexpected fault escaped the refresh path.

    The original exception is available as ``__cause__``.
    """
