"""Sources of the issuer and key used to sign requests."""

from __future__ import annotations

from datetime import timedelta
from typing import Protocol

import google.auth
from google.auth import credentials as ga_credentials
from google.auth import impersonated_credentials

from ._exceptions import SignedURLUnavailableError
from ._keys import SigningKey
from ._models import SigningIdentity, SigningOptions

__all__ = [
    "CredentialSource",
    "GoogleCredentialSource",
    "StaticCredentialSource",
    "resolve_identity",
]

_SCOPES = ["https://www.googleapis.com/auth/devstorage.read_write"]


class CredentialSource(Protocol):
    """Fallback for the issuer and key when the caller does not pass them."""

    def issuer(self) -> str | None:
        """Return the email of the service account that signs."""

    def signing_key(self) -> SigningKey | None:
        """Return the key or signer for that service account."""


class StaticCredentialSource:
    """Credential source returning fixed values.

    Parameters
    ----------
    issuer
        Service account email.
    key
        Signing key for that service account, such as the ``private_key``
        field of a service account key file.
    """

    def __init__(self, issuer: str | None, key: SigningKey | None) -> None:
        self._issuer = issuer
        self._key = key

    def issuer(self) -> str | None:
        return self._issuer

    def signing_key(self) -> SigningKey | None:
        return self._key


class _CredentialsSigner:
    """Adapt ``google.auth.credentials.Signing`` to `~gcsign.Signable`."""

    def __init__(self, credentials: ga_credentials.Signing) -> None:
        self._credentials = credentials

    def sign(self, message: bytes) -> bytes:
        return self._credentials.sign_bytes(message)


class GoogleCredentialSource:
    """Credential source backed by google-auth credentials.

    Service account credentials sign locally with their private key.
    Impersonated credentials sign through the IAM Credentials API, which is
    the correct approach when running as a Kubernetes pod using workload
    identity. Credentials that cannot sign, such as user credentials,
    provide neither an issuer nor a key.

    Parameters
    ----------
    credentials
        Credentials to sign with.
    """

    def __init__(self, credentials: ga_credentials.Credentials) -> None:
        self._credentials = credentials

    @classmethod
    def from_default(cls) -> GoogleCredentialSource:
        """Use the application default credentials.

        Raises
        ------
        google.auth.exceptions.DefaultCredentialsError
            Raised if no default credentials are available.
        """
        credentials, _ = google.auth.default(scopes=_SCOPES)
        return cls(credentials)

    @classmethod
    def impersonated(
        cls, service_account: str, lifetime: timedelta = timedelta(hours=1)
    ) -> GoogleCredentialSource:
        """Sign as another service account via credential impersonation.

        Parameters
        ----------
        service_account
            The service account to use to sign. The default credentials must
            have ``roles/iam.serviceAccountTokenCreator`` on it.
        lifetime
            Lifetime of the impersonated access token.

        Raises
        ------
        google.auth.exceptions.DefaultCredentialsError
            Raised if no default credentials are available.
        """
        source_credentials, _ = google.auth.default()
        credentials = impersonated_credentials.Credentials(
            source_credentials=source_credentials,
            target_principal=service_account,
            target_scopes=_SCOPES,
            lifetime=int(lifetime.total_seconds()),
        )
        return cls(credentials)

    def issuer(self) -> str | None:
        if not isinstance(self._credentials, ga_credentials.Signing):
            return None
        return self._credentials.signer_email

    def signing_key(self) -> SigningKey | None:
        if not isinstance(self._credentials, ga_credentials.Signing):
            return None
        return _CredentialsSigner(self._credentials)


def _is_empty(value: object) -> bool:
    return value is None or (isinstance(value, str | bytes) and not value)


def resolve_identity(
    options: SigningOptions, credentials: CredentialSource | None = None
) -> SigningIdentity:
    """Determine who signs and with which key.

    The issuer is taken from ``options.issuer``, then
    ``options.client_email``, then the credential source. The key is taken
    from ``options.signing_key``, then ``options.private_key``, then the
    credential source. The credential source is only consulted for values
    the options do not supply.

    Parameters
    ----------
    options
        Signing options.
    credentials
        Fallback source of the issuer and key, if any.

    Returns
    -------
    SigningIdentity
        Issuer and key to sign with.

    Raises
    ------
    SignedURLUnavailableError
        Raised if no issuer or no key could be found.
    """
    issuer = options.issuer or options.client_email
    if not issuer and credentials:
        issuer = credentials.issuer()
    key = options.signing_key
    if _is_empty(key):
        key = options.private_key
    if _is_empty(key) and credentials:
        key = credentials.signing_key()
    if not issuer or key is None or _is_empty(key):
        raise SignedURLUnavailableError(
            issuer=bool(issuer), key=not _is_empty(key)
        )
    return SigningIdentity(issuer=issuer, key=key)
