"""Signed URLs and signed POST policies for Google Cloud Storage."""

from ._assemble import build_post_object, build_signed_url, url_resource_path
from ._canonical import (
    canonical_resource_path,
    canonicalize_headers,
    expiration_timestamp,
    resolve_options,
    signable_string,
)
from ._config import SignerSettings
from ._constants import (
    DEFAULT_BASE_URL,
    DEFAULT_EXPIRATION,
    ENCRYPTION_KEY_PREFIX,
)
from ._credentials import (
    CredentialSource,
    GoogleCredentialSource,
    StaticCredentialSource,
    resolve_identity,
)
from ._exceptions import (
    InvalidHeadersError,
    InvalidPolicyError,
    KeyParseError,
    SignedURLUnavailableError,
    SigningConfigurationError,
    SigningError,
)
from ._keys import (
    RSASigningKey,
    Signable,
    SigningKey,
    load_signing_key,
    sign,
)
from ._models import (
    PostObject,
    ResourceLocator,
    SignedArtifact,
    SignedURL,
    SigningIdentity,
    SigningMode,
    SigningOptions,
)
from ._service import SignedURLService

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_EXPIRATION",
    "ENCRYPTION_KEY_PREFIX",
    "CredentialSource",
    "GoogleCredentialSource",
    "InvalidHeadersError",
    "InvalidPolicyError",
    "KeyParseError",
    "PostObject",
    "RSASigningKey",
    "ResourceLocator",
    "Signable",
    "SignedArtifact",
    "SignedURL",
    "SignedURLService",
    "SignedURLUnavailableError",
    "SignerSettings",
    "SigningConfigurationError",
    "SigningError",
    "SigningIdentity",
    "SigningKey",
    "SigningMode",
    "SigningOptions",
    "StaticCredentialSource",
    "build_post_object",
    "build_signed_url",
    "canonical_resource_path",
    "canonicalize_headers",
    "expiration_timestamp",
    "load_signing_key",
    "resolve_identity",
    "resolve_options",
    "sign",
    "signable_string",
    "url_resource_path",
]
