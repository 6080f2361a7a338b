"""Assembly of signed URLs and signed POST policy fields."""

from __future__ import annotations

from collections.abc import Mapping

from ._canonical import canonical_resource_path
from ._escape import path_escape, policy_json, query_escape, strict_base64
from ._exceptions import InvalidPolicyError
from ._keys import sign
from ._models import (
    PostObject,
    ResourceLocator,
    SigningIdentity,
    SigningOptions,
)

__all__ = [
    "build_post_object",
    "build_signed_url",
    "url_resource_path",
    "validate_policy",
]


def url_resource_path(locator: ResourceLocator) -> str:
    """Return the escaped path of an object as it appears in a signed URL.

    The bucket and the object name are each escaped as a single component,
    so slashes in the object name become ``%2F``.
    """
    bucket = path_escape(locator.bucket, safe="")
    path = path_escape(locator.path, safe="")
    return f"/{bucket}/{path}"


def build_signed_url(
    base_url: str,
    locator: ResourceLocator,
    identity: SigningIdentity,
    signature: str,
    expires_at: int,
    query: Mapping[str, str] | None = None,
) -> str:
    """Construct a signed URL.

    Parameters
    ----------
    base_url
        Base URL of the storage service, without a trailing slash.
    locator
        Object the URL is for.
    identity
        Identity that generated the signature.
    signature
        Base64-encoded signature.
    expires_at
        Expiration time that was signed, in seconds since the epoch.
    query
        Additional query parameters, appended in iteration order after the
        signature parameters.

    Returns
    -------
    str
        The signed URL. Every query parameter name and value is escaped the
        same way, with spaces encoded as ``+``.
    """
    params: list[tuple[str, object]] = [
        ("GoogleAccessId", identity.issuer),
        ("Expires", expires_at),
        ("Signature", signature),
    ]
    if query:
        params.extend(query.items())
    query_string = "&".join(
        f"{query_escape(n)}={query_escape(v)}" for n, v in params
    )
    return f"{base_url}{url_resource_path(locator)}?{query_string}"


def build_post_object(
    base_url: str,
    locator: ResourceLocator,
    options: SigningOptions,
    identity: SigningIdentity,
) -> PostObject:
    """Construct the signed form fields for a POST upload.

    The policy is serialized to JSON, base64-encoded, and the base64 string
    (not the JSON) is signed. The ``key`` field is the canonical resource
    path without its leading slash (``bucket/object``), so the form is posted
    to the storage host itself.

    Parameters
    ----------
    base_url
        Base URL of the storage service, without a trailing slash.
    locator
        Object the upload will create.
    options
        Signing options. Only ``policy`` is used.
    identity
        Identity to sign with.

    Returns
    -------
    PostObject
        Upload target and form fields.

    Raises
    ------
    InvalidPolicyError
        Raised if the policy is not a mapping or cannot be serialized to
        JSON.
    KeyParseError
        Raised if the key material cannot be parsed.
    """
    policy = validate_policy(options.policy)
    try:
        serialized = policy_json(policy)
    except (TypeError, ValueError) as e:
        msg = f"Cannot serialize policy: {e!s}"
        raise InvalidPolicyError(msg) from e
    encoded_policy = strict_base64(serialized.encode())
    signature = sign(identity.key, encoded_policy)
    fields = {
        "key": canonical_resource_path(locator)[1:],
        "GoogleAccessId": identity.issuer,
        "signature": signature,
        "policy": encoded_policy,
    }
    return PostObject(url=base_url, fields=fields)


def validate_policy(policy: object) -> Mapping[str, object]:
    """Check that a POST policy is a mapping, treating `None` as empty.

    Raises
    ------
    InvalidPolicyError
        Raised if the policy is not a mapping.
    """
    if policy is None:
        return {}
    if not isinstance(policy, Mapping):
        raise InvalidPolicyError
    return policy
