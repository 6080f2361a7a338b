"""Test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
)

from gcsign.testing.gcs import MockSigningCredentials, patch_google_auth


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(private_key: rsa.RSAPrivateKey) -> str:
    """PKCS#8 PEM encoding of the key, as found in key files."""
    pem = private_key.private_bytes(
        Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()
    )
    return pem.decode()


@pytest.fixture
def mock_google_auth(
    private_key: rsa.RSAPrivateKey,
) -> Iterator[MockSigningCredentials]:
    yield from patch_google_auth(private_key)
