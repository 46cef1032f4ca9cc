from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

DEFAULT_CACHE_TIMEOUT = 600.0
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_MAX_RESPONSE_BYTES = 512 * 1024

LOGGER_NAME = "jwks_cache"
_STDERR_PREFIX = "jwks-cache: "


def _default_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


class _StderrHandler(logging.Handler):
    """Writes to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        super().__init__()
        self.setFormatter(logging.Formatter(_STDERR_PREFIX + "%(asctime)s %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stream = sys.stderr
            stream.write(self.format(record) + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def _stderr_logger() -> logging.Logger:
    logger = _default_logger()
    if any(isinstance(handler, _StderrHandler) for handler in logger.handlers):
        return logger
    handler = _StderrHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    # The handler above is the destination; root handlers would print it twice.
    logger.propagate = False
    return logger


@dataclass
class ClientConfig:
    """Resolved options for a ``JWKSClient``.

    Timeouts are in seconds. The ``with_*`` methods mutate in place and return
    the same instance so calls can be chained.
    """

    cache_timeout: float = DEFAULT_CACHE_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    verify_tls: bool = True
    max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES
    debug_logging: bool = False
    error_logging: bool = False
    logger: logging.Logger = field(default_factory=_default_logger)

    def _use_logger(self, logger: logging.Logger | None) -> None:
        if logger is not None:
            self.logger = logger
        elif self.logger.name == LOGGER_NAME:
            self.logger = _stderr_logger()

    def with_cache_timeout(self, timeout: float) -> ClientConfig:
        if timeout < 0:
            raise ValueError("cache timeout must be non-negative")
        self.cache_timeout = float(timeout)
        return self

    def with_request_timeout(self, timeout: float) -> ClientConfig:
        if timeout <= 0:
            raise ValueError("request timeout must be positive")
        self.request_timeout = float(timeout)
        return self

    def with_tls_verification(self, enabled: bool) -> ClientConfig:
        self.verify_tls = enabled
        return self

    def with_max_response_bytes(self, limit: int) -> ClientConfig:
        if limit <= 0:
            raise ValueError("max response bytes must be positive")
        self.max_response_bytes = int(limit)
        return self

    def with_debug_logging(
        self, enabled: bool, logger: logging.Logger | None = None
    ) -> ClientConfig:
        self.debug_logging = enabled
        if enabled:
            self._use_logger(logger)
        return self

    def with_error_logging(
        self, enabled: bool, logger: logging.Logger | None = None
    ) -> ClientConfig:
        self.error_logging = enabled
        if enabled:
            self._use_logger(logger)
        return self


def new_config() -> ClientConfig:
    return ClientConfig()
