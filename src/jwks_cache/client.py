from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timezone

from .config import ClientConfig, new_config
from .errors import FetchError, JWKSError, ParseError, RefreshError, StatusError
from .models import Key, KeySet, parse_key_set
from .rwlock import ReadWriteLock
from .store import KeyStore
from .transport import HTTPTransport, Transport, validate_endpoint


class JWKSClient:
    """Reads signing keys from a JSON Web Key Set endpoint and caches them.

    Reads of a fresh key set share a read lock. A stale or empty cache is
    refreshed under the write lock, with staleness re-checked once the lock is
    held so callers that raced past the first check do not fetch twice. The
    network request runs while the write lock is held, which means readers
    arriving mid-refresh wait for it rather than being served the stale set.

    A failed refresh leaves the cache exactly as it was and raises; stale keys
    are never returned in place of an error.
    """

    def __init__(
        self,
        endpoint_url: str,
        config: ClientConfig | None = None,
        *,
        transport: Transport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.endpoint_url = validate_endpoint(endpoint_url)
        self.config = config if config is not None else new_config()
        self.transport: Transport = (
            transport if transport is not None else HTTPTransport.from_config(self.config)
        )
        self.store = KeyStore()
        self._clock = clock
        self._lock = ReadWriteLock()

    def get_keys(self) -> KeySet:
        with self._lock.read():
            if not self.store.is_stale(self._clock()):
                return self._current()
        return self.refresh()

    def get_signing_key(self, kid: str) -> Key | None:
        found: Key | None = None
        for key in self.get_keys():
            # No early exit: with duplicate kids the last matching entry wins.
            if key.kid == kid and key.use == "sig":
                found = key
        return found

    def refresh(self) -> KeySet:
        """Fetch a new key set unless another caller already refreshed it."""
        with self._lock.write():
            if not self.store.is_stale(self._clock()):
                return self._current()
            try:
                keys = self._fetch()
            except JWKSError:
                raise
            except Exception as exc:
                self._log_error("Recovered from unexpected failure during refresh: %r", exc)
                raise RefreshError(f"unexpected failure refreshing {self.endpoint_url}") from exc
            expiration = self._clock() + self.config.cache_timeout
            self.store.replace(keys, expiration)
            self._log_debug(
                "Fetched %d keys, expires %s",
                len(keys),
                datetime.fromtimestamp(expiration, tz=timezone.utc).isoformat(),
            )
            return keys

    def invalidate(self) -> None:
        with self._lock.write():
            self.store.clear()

    def _current(self) -> KeySet:
        keys = self.store.current()
        return keys if keys is not None else ()

    def _fetch(self) -> KeySet:
        self._log_debug("Begin fetch key set from %s", self.endpoint_url)
        try:
            response = self.transport.get(self.endpoint_url)
        except FetchError as exc:
            self._log_error("Keys request failed: %s", exc)
            raise
        if response.status >= 400:
            self._log_error("Keys request returned non-success status (%d)", response.status)
            raise StatusError(self.endpoint_url, response.status)
        try:
            return parse_key_set(response.body)
        except ParseError as exc:
            self._log_error("Malformed key set: %s", exc)
            raise

    def _log_debug(self, msg: str, *args: object) -> None:
        if self.config.debug_logging:
            self.config.logger.debug(msg, *args)

    def _log_error(self, msg: str, *args: object) -> None:
        if self.config.error_logging:
            self.config.logger.error(msg, *args)
