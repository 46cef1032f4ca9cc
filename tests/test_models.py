from __future__ import annotations

import json
import time

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jwt import algorithms

from jwks_cache.errors import ParseError
from jwks_cache.models import Key, key_set_to_dict, parse_key_set

_SINGLE_KEY = (
    b'{"keys":[{"alg":"RS256","kty":"RSA","use":"sig","kid":"K1",'
    b'"n":"N","e":"E","x5c":["C"],"x5t":"T"}]}'
)


def _rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _private_pem(private_key: rsa.RSAPrivateKey) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


def test_parse_single_key() -> None:
    keys = parse_key_set(_SINGLE_KEY)
    assert len(keys) == 1
    key = keys[0]
    assert key.kid == "K1"
    assert key.kty == "RSA"
    assert key.alg == "RS256"
    assert key.use == "sig"
    assert key.x5c == ("C",)
    assert key.x5t == "T"
    assert key.n == "N"
    assert key.e == "E"
    assert key.key_ops == ()


def test_parse_keeps_payload_order_and_key_ops() -> None:
    body = json.dumps(
        {
            "keys": [
                {"kid": "b", "kty": "RSA", "use": "enc", "key_ops": ["encrypt"]},
                {"kid": "a", "kty": "EC", "crv": "P-256", "x": "X", "y": "Y"},
            ]
        }
    ).encode("utf-8")
    keys = parse_key_set(body)
    assert [key.kid for key in keys] == ["b", "a"]
    assert keys[0].key_ops == ("encrypt",)
    assert keys[1].crv == "P-256"


def test_parse_missing_members_default_to_empty() -> None:
    keys = parse_key_set(b'{"keys":[{"blah":"jjj"}]}')
    assert keys == (Key(),)


def test_parse_empty_key_list() -> None:
    assert parse_key_set(b'{"keys":[]}') == ()


@pytest.mark.parametrize(
    ("body", "message"),
    [
        (b'{"keys":[{"blah":"jjj"}}', "not valid JSON"),
        (b"\xff\xfe", "not valid JSON"),
        (b"[]", "must be an object"),
        (b'{"other":[]}', "keys must be a list"),
        (b'{"keys":{"kid":"x"}}', "keys must be a list"),
        (b'{"keys":["x"]}', "contain objects"),
        (b'{"keys":[{"kid":7}]}', "kid must be a string"),
        (b'{"keys":[{"x5c":"C"}]}', "x5c must be a list of strings"),
        (b'{"keys":[{"key_ops":[1]}]}', "key_ops must be a list of strings"),
    ],
)
def test_parse_rejects_malformed_payloads(body: bytes, message: str) -> None:
    with pytest.raises(ParseError, match=message):
        parse_key_set(body)


def test_key_is_immutable() -> None:
    key = parse_key_set(_SINGLE_KEY)[0]
    with pytest.raises(AttributeError):
        key.kid = "other"  # type: ignore[misc]


def test_to_dict_omits_empty_members() -> None:
    key = parse_key_set(_SINGLE_KEY)[0]
    assert key.to_dict() == {
        "alg": "RS256",
        "e": "E",
        "kid": "K1",
        "kty": "RSA",
        "n": "N",
        "use": "sig",
        "x5c": ["C"],
        "x5t": "T",
    }
    assert key_set_to_dict((key,)) == {"keys": [key.to_dict()]}


def test_public_key_verifies_rs256_token() -> None:
    private_key = _rsa_private_key()
    jwk = json.loads(algorithms.RSAAlgorithm.to_jwk(private_key.public_key()))
    jwk.update({"kid": "rsa-1", "use": "sig", "alg": "RS256"})
    key = parse_key_set(json.dumps({"keys": [jwk]}).encode("utf-8"))[0]

    token = jwt.encode(
        {"sub": "user", "exp": int(time.time()) + 60},
        _private_pem(private_key),
        algorithm="RS256",
        headers={"kid": "rsa-1"},
    )
    payload = jwt.decode(token, key.public_key(), algorithms=["RS256"])
    assert payload["sub"] == "user"


def test_public_key_for_ec_key() -> None:
    private_key = ec.generate_private_key(ec.SECP256R1())
    jwk = json.loads(algorithms.ECAlgorithm.to_jwk(private_key.public_key()))
    key = Key.from_dict(jwk)
    assert isinstance(key.public_key(), ec.EllipticCurvePublicKey)


def test_public_key_rejects_unknown_kty() -> None:
    with pytest.raises(ValueError, match="unsupported JWK kty"):
        Key(kid="x", kty="oct").public_key()
