"""Configuration for the signing service."""

from __future__ import annotations

from datetime import timedelta

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._constants import DEFAULT_BASE_URL, DEFAULT_EXPIRATION
from ._credentials import CredentialSource, GoogleCredentialSource
from .logging import LogLevel, Profile

__all__ = ["SignerSettings"]


class SignerSettings(BaseSettings):
    """Settings for `~gcsign.SignedURLService`.

    Normally read from environment variables with the ``GCSIGN_`` prefix
    once, when the application starts.
    """

    model_config = SettingsConfigDict(
        env_prefix="GCSIGN_", populate_by_name=True
    )

    base_url: str = Field(
        DEFAULT_BASE_URL,
        title="Storage base URL",
        description=(
            "Scheme and host of the Cloud Storage XML API. Override this to"
            " generate URLs for a test endpoint."
        ),
    )

    lifetime: timedelta = Field(
        DEFAULT_EXPIRATION,
        title="Default lifetime",
        description="How long signatures are valid if not otherwise given",
    )

    service_account: str | None = Field(
        None,
        title="Signing service account",
        description=(
            "If set, sign as this service account using credential"
            " impersonation. The default credentials must have"
            " roles/iam.serviceAccountTokenCreator on it."
        ),
    )

    use_default_credentials: bool = Field(
        False,
        title="Sign with default credentials",
        description=(
            "If no service account is set, sign with the application default"
            " credentials, which must be service account credentials"
        ),
    )

    log_level: LogLevel = Field(LogLevel.INFO, title="Log level")

    profile: Profile = Field(Profile.production, title="Logging profile")

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"Base URL {v} is not an HTTP URL")
        return v.rstrip("/")

    @field_validator("lifetime")
    @classmethod
    def _validate_lifetime(cls, v: timedelta) -> timedelta:
        if v <= timedelta(seconds=0):
            raise ValueError("Lifetime must be positive")
        return v

    def make_credential_source(self) -> CredentialSource | None:
        """Construct the configured credential source.

        Returns
        -------
        CredentialSource or None
            Impersonated credentials if ``service_account`` is set, default
            credentials if ``use_default_credentials`` is set, otherwise
            `None`, in which case every request must carry its own issuer and
            key.
        """
        if self.service_account:
            return GoogleCredentialSource.impersonated(self.service_account)
        elif self.use_default_credentials:
            return GoogleCredentialSource.from_default()
        else:
            return None
