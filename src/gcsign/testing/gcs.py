"""Mock Google credentials for testing signed URL generation."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
from unittest.mock import Mock, patch

from cryptography.hazmat.primitives.asymmetric import rsa
from google.oauth2 import service_account

from .._keys import RSASigningKey

__all__ = [
    "MockSigningCredentials",
    "patch_google_auth",
]


class MockSigningCredentials(Mock):
    """Mock version of ``google.oauth2.service_account.Credentials``.

    Signs locally with the given key, so signatures can be checked against
    the matching public key.

    Parameters
    ----------
    signer_email
        Service account email to report.
    private_key
        Key to sign with.
    """

    def __init__(
        self, signer_email: str, private_key: rsa.RSAPrivateKey
    ) -> None:
        super().__init__(spec=service_account.Credentials)
        self.signer_email = signer_email
        self._signing_key = RSASigningKey(private_key)

    def sign_bytes(self, message: bytes) -> bytes:
        """Sign a message with RSA-SHA256.

        Parameters
        ----------
        message
            Message to sign.

        Returns
        -------
        bytes
            Raw signature.
        """
        return self._signing_key.sign(message)


def patch_google_auth(
    private_key: rsa.RSAPrivateKey,
    *,
    service_account_email: str = "signer@example.iam.gserviceaccount.com",
) -> Iterator[MockSigningCredentials]:
    """Replace google-auth default and impersonated credentials with mocks.

    ``google.auth.default`` will return credentials for
    ``service_account_email`` and impersonated credentials will report the
    target principal as their email. Both sign with ``private_key``.

    To use this mock successfully, you must not import ``default`` or
    ``impersonated_credentials.Credentials`` directly into the local
    namespace, or it will not be correctly patched.

    Parameters
    ----------
    private_key
        Key all mock credentials sign with.
    service_account_email
        Email of the default credentials.

    Yields
    ------
    MockSigningCredentials
        The mock default credentials.

    Examples
    --------
    Normally this should be called from a fixture in ``tests/conftest.py``
    such as the following:

    .. code-block:: python

       from gcsign.testing.gcs import patch_google_auth


       @pytest.fixture
       def mock_google_auth(
           private_key: rsa.RSAPrivateKey,
       ) -> Iterator[MockSigningCredentials]:
           yield from patch_google_auth(private_key)
    """
    default_credentials = MockSigningCredentials(
        service_account_email, private_key
    )

    def impersonate(
        *, target_principal: str, **kwargs: Any
    ) -> MockSigningCredentials:
        return MockSigningCredentials(target_principal, private_key)

    with patch(
        "google.auth.impersonated_credentials.Credentials",
        side_effect=impersonate,
    ):
        with patch(
            "google.auth.default",
            return_value=(default_credentials, "some-project"),
        ):
            yield default_credentials
