from __future__ import annotations

from jwks_cache.models import Key
from jwks_cache.store import KeyStore


def test_empty_store_is_stale() -> None:
    store = KeyStore()
    assert store.is_stale(0.0)
    assert store.current() is None
    assert store.expiration is None


def test_replace_installs_keys_and_expiration_together() -> None:
    store = KeyStore()
    keys = (Key(kid="a"),)
    store.replace(keys, 100.0)
    assert store.current() == keys
    assert store.expiration == 100.0
    assert not store.is_stale(99.9)
    assert store.is_stale(100.0)
    assert store.is_stale(150.0)


def test_stale_entry_is_still_readable() -> None:
    store = KeyStore()
    store.replace((Key(kid="a"),), 10.0)
    assert store.is_stale(20.0)
    assert store.current() == (Key(kid="a"),)


def test_replace_discards_previous_entry() -> None:
    store = KeyStore()
    store.replace((Key(kid="a"),), 10.0)
    store.replace((Key(kid="b"), Key(kid="c")), 20.0)
    assert [key.kid for key in store.current() or ()] == ["b", "c"]
    assert store.expiration == 20.0


def test_clear_empties_store() -> None:
    store = KeyStore()
    store.replace((Key(kid="a"),), 10.0)
    store.clear()
    assert store.current() is None
    assert store.is_stale(0.0)
