"""Data types for signed URLs and signed POST policies."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from typing import Any, ClassVar, TypeAlias

from ._keys import SigningKey

__all__ = [
    "PostObject",
    "ResourceLocator",
    "SignedArtifact",
    "SignedURL",
    "SigningIdentity",
    "SigningMode",
    "SigningOptions",
]


class SigningMode(StrEnum):
    """Which kind of signed artifact to generate."""

    url = "url"
    """A signed URL carrying the signature in its query string."""

    post = "post"
    """Signed form fields for a browser-based POST upload."""


@dataclass(frozen=True, slots=True)
class ResourceLocator:
    """An object in a Cloud Storage bucket.

    Parameters
    ----------
    bucket
        Name of the bucket.
    path
        Name of the object within the bucket, without a leading slash.

    Raises
    ------
    ValueError
        Raised if either the bucket or the object name is empty.
    """

    bucket: str
    path: str

    def __post_init__(self) -> None:
        if not self.bucket:
            raise ValueError("Bucket name must not be empty")
        if not self.path:
            raise ValueError(f"Object name in bucket {self.bucket} is empty")

    @classmethod
    def from_uri(cls, uri: str) -> ResourceLocator:
        """Parse a storage URI.

        Parameters
        ----------
        uri
            URI for the storage object. This must start with ``gs://`` or
            ``s3://`` and give the bucket as the host. Everything after the
            slash following the bucket is the object name, taken verbatim,
            so ``?`` and ``#`` are part of the name rather than a query or
            fragment.

        Returns
        -------
        ResourceLocator
            Corresponding locator.

        Raises
        ------
        ValueError
            Raised if the URI is not a ``gs://`` or ``s3://`` URI, or does
            not name both a bucket and an object.
        """
        scheme, separator, rest = uri.partition("://")
        if not separator or scheme not in ("gs", "s3"):
            raise ValueError(f"URI {uri} is not a gs:// or s3:// URI")
        bucket, _, path = rest.partition("/")
        return cls(bucket=bucket, path=path)

    def __str__(self) -> str:
        return f"gs://{self.bucket}/{self.path}"


@dataclass(frozen=True, kw_only=True)
class SigningOptions:
    """Options controlling what a signature authorizes.

    Every field is optional. `~gcsign.resolve_options` fills in the defaults
    and converts the relative ``expires`` into the absolute ``expires_at``,
    returning a new object.
    """

    method: str | None = None
    """HTTP method the signature allows, ``GET`` if not given."""

    content_md5: str | None = None
    """Base64 MD5 digest the request must send as ``Content-MD5``."""

    content_type: str | None = None
    """Content type the request must send as ``Content-Type``."""

    expires: int | timedelta | None = None
    """How long the signature is valid, in seconds if given as an `int`."""

    expires_at: int | None = None
    """Absolute expiration as seconds since the epoch.

    Set by option resolution. If given explicitly, ``expires`` is ignored.
    """

    headers: Mapping[str, str] | None = None
    """Extension headers (``x-goog-*``) the request must send."""

    signing_key: SigningKey | None = None
    """Key used to sign, taking precedence over ``private_key``."""

    private_key: SigningKey | None = None
    """Key used to sign if ``signing_key`` is not set."""

    issuer: str | None = None
    """Service account email, taking precedence over ``client_email``."""

    client_email: str | None = None
    """Service account email used if ``issuer`` is not set."""

    query: Mapping[str, str] | None = None
    """Additional query parameters appended to a signed URL, in order."""

    policy: Mapping[str, Any] | None = None
    """Policy document for a signed POST upload."""

    @property
    def resolved(self) -> bool:
        """Whether defaults have already been applied."""
        return self.expires_at is not None and self.method is not None


@dataclass(frozen=True, slots=True)
class SigningIdentity:
    """The identity a signature is generated under."""

    issuer: str
    """Service account email, sent as ``GoogleAccessId``."""

    key: SigningKey = field(repr=False)
    """Key material or signer for that service account."""


@dataclass(frozen=True, slots=True)
class SignedURL:
    """A URL granting time-limited access to an object."""

    mode: ClassVar[SigningMode] = SigningMode.url

    url: str
    """The full signed URL."""

    expires_at: int
    """When the storage service stops accepting the URL."""

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True, slots=True)
class PostObject:
    """Signed form fields for a direct browser upload.

    The fields should be sent as form fields of a ``multipart/form-data``
    POST request to ``url``, followed by the ``file`` field.
    """

    mode: ClassVar[SigningMode] = SigningMode.post

    url: str
    """Target URL of the upload form."""

    fields: dict[str, str]
    """Form fields: ``key``, ``GoogleAccessId``, ``signature``, ``policy``."""


SignedArtifact: TypeAlias = SignedURL | PostObject
"""Output of a signing operation, selected by `SigningMode`."""
