from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, cast

from jwt import algorithms

from .errors import ParseError

_STRING_MEMBERS = ("kid", "kty", "alg", "use", "x5t", "n", "e", "crv", "x", "y")
_ARRAY_MEMBERS = ("key_ops", "x5c")


@dataclass(frozen=True)
class Key:
    """One JSON Web Key as published by the endpoint.

    Members absent from the payload are left empty rather than rejected, so a
    key with only ``kid``/``kty`` still round-trips. ``kid`` is what callers
    select on; the protocol does not promise it is unique within a set.
    """

    kid: str = ""
    kty: str = ""
    alg: str = ""
    use: str = ""
    key_ops: tuple[str, ...] = ()
    x5c: tuple[str, ...] = ()
    x5t: str = ""
    n: str = ""
    e: str = ""
    crv: str = ""
    x: str = ""
    y: str = ""

    @classmethod
    def from_dict(cls, obj: dict[str, Any]) -> Key:
        values: dict[str, Any] = {}
        for name in _STRING_MEMBERS:
            value = obj.get(name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ParseError(f"JWK member {name} must be a string")
            values[name] = value
        for name in _ARRAY_MEMBERS:
            value = obj.get(name)
            if value is None:
                continue
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise ParseError(f"JWK member {name} must be a list of strings")
            values[name] = tuple(value)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name in _STRING_MEMBERS:
            value = getattr(self, name)
            if value:
                out[name] = value
        for name in _ARRAY_MEMBERS:
            value = getattr(self, name)
            if value:
                out[name] = list(value)
        return out

    def public_key(self) -> Any:
        """Build a key object usable as the ``key`` argument of ``jwt.decode``."""
        jwk_json = json.dumps(self.to_dict())
        if self.kty == "RSA":
            return algorithms.RSAAlgorithm.from_jwk(jwk_json)
        if self.kty == "EC":
            return algorithms.ECAlgorithm.from_jwk(jwk_json)
        if self.kty == "OKP":
            return algorithms.OKPAlgorithm.from_jwk(jwk_json)
        raise ValueError(f"unsupported JWK kty: {self.kty or '<missing>'}")


KeySet = tuple[Key, ...]


def parse_key_set(body: bytes) -> KeySet:
    try:
        parsed = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ParseError("JWKS response is not valid JSON") from exc
    if not isinstance(parsed, dict):
        raise ParseError("JWKS must be an object")
    keys = parsed.get("keys")
    if not isinstance(keys, list):
        raise ParseError("JWKS keys must be a list")

    out: list[Key] = []
    for item in keys:
        if not isinstance(item, dict):
            raise ParseError("JWKS keys must contain objects")
        out.append(Key.from_dict(cast(dict[str, Any], item)))
    return tuple(out)


def key_set_to_dict(keys: KeySet) -> dict[str, Any]:
    return {"keys": [key.to_dict() for key in keys]}
