from __future__ import annotations

from dataclasses import dataclass

from .models import KeySet


@dataclass(frozen=True)
class CacheEntry:
    keys: KeySet
    expiration: float


class KeyStore:
    """Holds the last fetched key set and when it stops being fresh.

    Not synchronized on its own; ``JWKSClient`` guards every access. The entry
    is swapped in one assignment so a reader never sees keys paired with
    another fetch's expiration.
    """

    def __init__(self) -> None:
        self._entry: CacheEntry | None = None

    @property
    def expiration(self) -> float | None:
        entry = self._entry
        return entry.expiration if entry is not None else None

    def is_stale(self, now: float) -> bool:
        entry = self._entry
        return entry is None or now >= entry.expiration

    def current(self) -> KeySet | None:
        entry = self._entry
        return entry.keys if entry is not None else None

    def replace(self, keys: KeySet, expiration: float) -> None:
        self._entry = CacheEntry(keys=tuple(keys), expiration=float(expiration))

    def clear(self) -> None:
        self._entry = None
