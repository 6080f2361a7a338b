"""Tests for signing keys and the signature primitive."""

from __future__ import annotations

from typing import Any

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
)
from google.auth.crypt import RSASigner

from gcsign import KeyParseError, RSASigningKey, load_signing_key, sign

from .support.signing import expected_signature, verify_signature


def test_sign(private_key: rsa.RSAPrivateKey, private_key_pem: str) -> None:
    message = "GET\n\n\n1700000000\n/bucket/object"
    signature = sign(private_key_pem, message)
    assert signature == expected_signature(private_key, message)
    assert "\n" not in signature
    verify_signature(private_key, signature, message)

    # The same signature is produced for every form of the key, and for
    # bytes messages.
    pkcs1_pem = private_key.private_bytes(
        Encoding.PEM, PrivateFormat.TraditionalOpenSSL, NoEncryption()
    )
    keys: list[Any] = [
        private_key_pem.encode(),
        pkcs1_pem,
        private_key,
        RSASigningKey(private_key),
        RSASigner.from_string(private_key_pem),
    ]
    for key in keys:
        assert sign(key, message) == signature
        assert sign(key, message.encode()) == signature


def test_load_signing_key(
    private_key: rsa.RSAPrivateKey, private_key_pem: str
) -> None:
    signer = RSASigner.from_string(private_key_pem)
    assert load_signing_key(signer) is signer

    key = load_signing_key(private_key_pem)
    assert isinstance(key, RSASigningKey)
    key = load_signing_key(private_key)
    assert isinstance(key, RSASigningKey)


def test_malformed_key(private_key_pem: str) -> None:
    with pytest.raises(KeyParseError) as excinfo:
        sign("not a key", "message")
    assert excinfo.value.__cause__ is not None

    truncated = private_key_pem[: len(private_key_pem) // 2]
    with pytest.raises(KeyParseError):
        sign(truncated, "message")
    with pytest.raises(KeyParseError):
        sign(b"", "message")

    # An EC key parses but cannot produce the RSA signatures we need.
    ec_key = ec.generate_private_key(ec.SECP256R1())
    ec_pem = ec_key.private_bytes(
        Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
    )
    with pytest.raises(KeyParseError, match="not an RSA key"):
        sign(ec_pem, "message")

    bogus: Any = 42
    with pytest.raises(KeyParseError):
        sign(bogus, "message")
