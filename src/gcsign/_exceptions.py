"""Exceptions for signed URL and POST policy generation."""

from __future__ import annotations

__all__ = [
    "InvalidHeadersError",
    "InvalidPolicyError",
    "KeyParseError",
    "SignedURLUnavailableError",
    "SigningConfigurationError",
    "SigningError",
]


class SigningError(Exception):
    """Base class for all errors raised while signing a request."""


class SignedURLUnavailableError(SigningError):
    """No issuer or no signing key could be found.

    Raised after checking the explicit options and the credential source,
    and always before any cryptographic work is done.
    """

    def __init__(self, *, issuer: bool, key: bool) -> None:
        missing = []
        if not issuer:
            missing.append("issuer")
        if not key:
            missing.append("signing key")
        super().__init__(
            f"Cannot sign request: no {' or '.join(missing)} available. Pass"
            " them explicitly or configure a credential source that can sign."
        )


class SigningConfigurationError(SigningError):
    """The caller passed a malformed signing option."""


class InvalidHeadersError(SigningConfigurationError):
    """Extension headers were not a flat mapping of names to values."""


class InvalidPolicyError(SigningConfigurationError):
    """The POST policy was not a mapping or could not be serialized."""

    def __init__(self, message: str = "policy must be a mapping") -> None:
        super().__init__(message)


class KeyParseError(SigningError):
    """The signing key material could not be parsed as an RSA private key."""
