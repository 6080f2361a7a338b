"""Service to generate signed URLs and signed POST policies."""

from __future__ import annotations

from datetime import timedelta

import structlog
from structlog.stdlib import BoundLogger

from ._assemble import build_post_object, build_signed_url, validate_policy
from ._canonical import (
    expiration_timestamp,
    resolve_options,
    signable_string,
)
from ._config import SignerSettings
from ._constants import DEFAULT_BASE_URL, DEFAULT_EXPIRATION
from ._credentials import CredentialSource, resolve_identity
from ._keys import sign
from ._models import (
    PostObject,
    ResourceLocator,
    SignedArtifact,
    SignedURL,
    SigningMode,
    SigningOptions,
)
from .logging import configure_logging

__all__ = ["SignedURLService"]


class SignedURLService:
    """Generate signed URLs and POST policies for Cloud Storage objects.

    Each call is an independent pipeline: apply option defaults, determine
    the signing identity, build the canonical string, sign it, and assemble
    the result. The service holds no mutable state and may be shared between
    threads.

    Parameters
    ----------
    credentials
        Where to get the issuer and key when a request does not carry its
        own. If `None`, every request must supply both.
    base_url
        Scheme and host of the storage service.
    lifetime
        Default lifetime of signatures.
    logger
        Logger to use. If not given, the ``gcsign`` logger is used.

    Notes
    -----
    Expiration is embedded in the signed artifact and enforced by the storage
    service, not by this class.
    """

    def __init__(
        self,
        credentials: CredentialSource | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        lifetime: timedelta = DEFAULT_EXPIRATION,
        logger: BoundLogger | None = None,
    ) -> None:
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._lifetime = lifetime
        self._logger = logger or structlog.get_logger("gcsign")

    @classmethod
    def from_settings(
        cls, settings: SignerSettings, logger: BoundLogger | None = None
    ) -> SignedURLService:
        """Create a service from its settings.

        This also configures logging for the ``gcsign`` logger with the log
        level and profile from the settings.

        Raises
        ------
        google.auth.exceptions.DefaultCredentialsError
            Raised if the settings ask for Google credentials and none are
            available.
        """
        configure_logging(
            name="gcsign",
            profile=settings.profile,
            log_level=settings.log_level,
        )
        return cls(
            settings.make_credential_source(),
            base_url=settings.base_url,
            lifetime=settings.lifetime,
            logger=logger,
        )

    def sign(
        self,
        resource: ResourceLocator | str,
        options: SigningOptions | None = None,
        *,
        mode: SigningMode = SigningMode.url,
    ) -> SignedArtifact:
        """Generate a signed artifact of the requested kind.

        Parameters
        ----------
        resource
            Object to sign for, either as a locator or a ``gs://`` URI.
        options
            Signing options.
        mode
            Whether to generate a signed URL or signed POST fields.

        Returns
        -------
        SignedArtifact
            A `SignedURL` or a `PostObject`, matching ``mode``.
        """
        match mode:
            case SigningMode.url:
                return self.signed_url(resource, options)
            case SigningMode.post:
                return self.post_object(resource, options)

    def signed_url(
        self,
        resource: ResourceLocator | str,
        options: SigningOptions | None = None,
    ) -> SignedURL:
        """Generate a signed URL for a storage object.

        Parameters
        ----------
        resource
            Object to sign for, either as a locator or a ``gs://`` URI.
        options
            Signing options. The HTTP method defaults to ``GET``.

        Returns
        -------
        SignedURL
            New signed URL.

        Raises
        ------
        InvalidHeadersError
            Raised if the extension headers are malformed.
        KeyParseError
            Raised if the key material cannot be parsed.
        SignedURLUnavailableError
            Raised if no issuer or key is available.
        ValueError
            Raised if ``resource`` is not a valid storage URI.
        """
        locator = self._to_locator(resource)
        options = resolve_options(options, default_expires=self._lifetime)
        identity = resolve_identity(options, self._credentials)
        signature = sign(identity.key, signable_string(options, locator))
        expires_at = expiration_timestamp(options)
        url = build_signed_url(
            self._base_url,
            locator,
            identity,
            signature,
            expires_at,
            options.query,
        )
        self._logger.debug(
            "Generated signed URL",
            bucket=locator.bucket,
            object=locator.path,
            method=options.method,
            issuer=identity.issuer,
            expires_at=expires_at,
        )
        return SignedURL(url=url, expires_at=expires_at)

    def post_object(
        self,
        resource: ResourceLocator | str,
        options: SigningOptions | None = None,
    ) -> PostObject:
        """Generate signed form fields for a browser upload.

        Parameters
        ----------
        resource
            Object the upload will create.
        options
            Signing options carrying the ``policy`` document. Conditions and
            expiration of the upload are given by the policy.

        Returns
        -------
        PostObject
            Upload target and the fields to embed in the upload form.

        Raises
        ------
        InvalidPolicyError
            Raised if the policy is not a mapping.
        KeyParseError
            Raised if the key material cannot be parsed.
        SignedURLUnavailableError
            Raised if no issuer or key is available.
        ValueError
            Raised if ``resource`` is not a valid storage URI.
        """
        locator = self._to_locator(resource)
        options = resolve_options(options, default_expires=self._lifetime)
        validate_policy(options.policy)
        identity = resolve_identity(options, self._credentials)
        post_object = build_post_object(
            self._base_url, locator, options, identity
        )
        self._logger.debug(
            "Generated signed POST policy",
            bucket=locator.bucket,
            object=locator.path,
            issuer=identity.issuer,
        )
        return post_object

    def _to_locator(self, resource: ResourceLocator | str) -> ResourceLocator:
        if isinstance(resource, ResourceLocator):
            return resource
        return ResourceLocator.from_uri(resource)
