"""Signing keys and the RSA-SHA256 signature primitive."""

from __future__ import annotations

from typing import Protocol, Self, TypeAlias, runtime_checkable

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ._escape import strict_base64
from ._exceptions import KeyParseError

__all__ = [
    "RSASigningKey",
    "Signable",
    "SigningKey",
    "load_signing_key",
    "sign",
]


@runtime_checkable
class Signable(Protocol):
    """Anything that can produce an RSA-SHA256 signature of a message.

    This is the same interface as ``google.auth.crypt.Signer``, so signers
    from google-auth can be used directly.
    """

    def sign(self, message: bytes) -> bytes:
        """Sign a message with RSA PKCS#1 v1.5 over SHA-256."""


SigningKey: TypeAlias = Signable | rsa.RSAPrivateKey | bytes | str
"""Key material accepted wherever a signing key is expected."""


class RSASigningKey:
    """Sign messages with an RSA private key.

    Parameters
    ----------
    private_key
        Parsed RSA private key. The underlying key object is safe to share
        between threads.
    """

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        self._private_key = private_key

    @classmethod
    def from_pem(cls, pem: bytes | str) -> Self:
        """Parse an unencrypted PEM-encoded RSA private key.

        Both PKCS#1 (``BEGIN RSA PRIVATE KEY``) and PKCS#8 (``BEGIN PRIVATE
        KEY``, as found in service account key files) are accepted.

        Raises
        ------
        KeyParseError
            Raised if the key cannot be parsed or is not an RSA key.
        """
        data = pem.encode() if isinstance(pem, str) else pem
        try:
            private_key = serialization.load_pem_private_key(data, None)
        except (TypeError, ValueError, UnsupportedAlgorithm) as e:
            raise KeyParseError(f"Cannot parse signing key: {e!s}") from e
        if not isinstance(private_key, rsa.RSAPrivateKey):
            key_type = type(private_key).__name__
            raise KeyParseError(f"Signing key is {key_type}, not an RSA key")
        return cls(private_key)

    def sign(self, message: bytes) -> bytes:
        return self._private_key.sign(
            message, padding.PKCS1v15(), hashes.SHA256()
        )


def load_signing_key(key: SigningKey) -> Signable:
    """Turn key material into something that can sign.

    Parameters
    ----------
    key
        A `Signable` (such as a ``google.auth.crypt.Signer``), which is
        returned unchanged, a parsed RSA private key, or PEM key material.

    Returns
    -------
    Signable
        Object to sign messages with.

    Raises
    ------
    KeyParseError
        Raised if the key material cannot be parsed or is of an unknown type.
    """
    # RSAPrivateKey also has a sign method, but with a different signature.
    if isinstance(key, rsa.RSAPrivateKey):
        return RSASigningKey(key)
    if isinstance(key, bytes | str):
        return RSASigningKey.from_pem(key)
    if isinstance(key, Signable):
        return key
    raise KeyParseError(f"Cannot sign with a {type(key).__name__}")


def sign(key: SigningKey, message: bytes | str) -> str:
    """Sign a message with RSA-SHA256.

    Parameters
    ----------
    key
        Signing key, in any form accepted by `load_signing_key`.
    message
        Message to sign. Strings are encoded in UTF-8.

    Returns
    -------
    str
        Base64-encoded signature without line breaks.

    Raises
    ------
    KeyParseError
        Raised if the key material cannot be parsed.
    """
    signer = load_signing_key(key)
    if isinstance(message, str):
        message = message.encode()
    return strict_base64(signer.sign(message))
