"""Construction of the canonical string that is signed."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import replace
from datetime import UTC, datetime, timedelta

from ._constants import DEFAULT_EXPIRATION, ENCRYPTION_KEY_PREFIX
from ._escape import path_escape
from ._exceptions import InvalidHeadersError
from ._models import ResourceLocator, SigningOptions

_WHITESPACE_REGEX = re.compile(r"\s+", re.ASCII)

__all__ = [
    "canonical_resource_path",
    "canonicalize_headers",
    "expiration_timestamp",
    "resolve_options",
    "signable_string",
]


def resolve_options(
    options: SigningOptions | None = None,
    *,
    now: datetime | None = None,
    default_expires: timedelta = DEFAULT_EXPIRATION,
) -> SigningOptions:
    """Apply defaults to signing options.

    Parameters
    ----------
    options
        Options from the caller. These are not modified.
    now
        Time from which the expiration is computed. Defaults to the current
        time.
    default_expires
        Lifetime used if ``options.expires`` is not set.

    Returns
    -------
    SigningOptions
        New options with ``method`` defaulted to ``GET`` and ``expires_at``
        set to an absolute timestamp. Options that are already resolved are
        returned unchanged, so their expiration does not move.
    """
    if options is None:
        options = SigningOptions()
    if options.resolved:
        return options
    expires_at = expiration_timestamp(
        options, now=now, default_expires=default_expires
    )
    method = options.method or "GET"
    return replace(options, method=method, expires_at=expires_at)


def expiration_timestamp(
    options: SigningOptions,
    *,
    now: datetime | None = None,
    default_expires: timedelta = DEFAULT_EXPIRATION,
) -> int:
    """Return the absolute expiration time of a signature.

    Parameters
    ----------
    options
        Signing options. If ``expires_at`` is set, it is returned as-is.
    now
        Time from which a relative ``expires`` is counted. Defaults to the
        current time.
    default_expires
        Lifetime used if neither ``expires_at`` nor ``expires`` is set.

    Returns
    -------
    int
        Expiration in whole seconds since the epoch, rounded down.
    """
    if options.expires_at is not None:
        return options.expires_at
    if now is None:
        now = datetime.now(tz=UTC)
    expires = options.expires
    if expires is None:
        expires = default_expires
    elif not isinstance(expires, timedelta):
        expires = timedelta(seconds=expires)
    return math.floor((now + expires).timestamp())


def canonical_resource_path(locator: ResourceLocator) -> str:
    """Return the escaped ``/bucket/object`` path that is signed.

    Slashes inside the object name are kept as path separators. Everything
    else outside the unreserved set is percent-escaped, with spaces becoming
    ``%20``.
    """
    return path_escape(f"/{locator.bucket}/{locator.path}")


def canonicalize_headers(headers: Mapping[str, str] | None) -> str:
    """Canonicalize extension headers for inclusion in the signed string.

    Parameters
    ----------
    headers
        Mapping of header names to values, or `None`.

    Returns
    -------
    str
        One ``name:value`` line per header, each terminated by a newline,
        with names lowercased and runs of whitespace in values collapsed to a
        single space, sorted. Headers whose names start with
        ``x-goog-encryption-key`` are left out, since customer-supplied
        encryption keys must not be part of the signature. Returns the empty
        string if there are no headers.

    Raises
    ------
    InvalidHeadersError
        Raised if ``headers`` is not a mapping of strings to scalar values.
    """
    if headers is None:
        return ""
    if not isinstance(headers, Mapping):
        msg = f"Headers must be given as a mapping, not {type(headers)}"
        raise InvalidHeadersError(msg)
    lines = []
    for name, value in headers.items():
        if not isinstance(name, str):
            raise InvalidHeadersError(f"Header name {name!r} is not a string")
        if not isinstance(value, str | int | float):
            msg = f"Value of header {name} is a {type(value)}, not a string"
            raise InvalidHeadersError(msg)
        value = _WHITESPACE_REGEX.sub(" ", str(value))
        line = f"{name.lower()}:{value}\n"
        if not line.startswith(ENCRYPTION_KEY_PREFIX):
            lines.append(line)
    return "".join(sorted(lines))


def signable_string(options: SigningOptions, locator: ResourceLocator) -> str:
    """Build the string to sign for a signed URL.

    Parameters
    ----------
    options
        Signing options. Defaults are applied if they have not been already.
    locator
        Object the signature is for.

    Returns
    -------
    str
        Method, Content-MD5, Content-Type, expiration, and canonical headers
        followed by the resource path, joined by newlines. Missing values are
        empty lines so that every field stays in its position.

    Raises
    ------
    InvalidHeadersError
        Raised if the extension headers are malformed.
    """
    options = resolve_options(options)
    resource = canonicalize_headers(options.headers)
    resource += canonical_resource_path(locator)
    fields = [
        options.method,
        options.content_md5,
        options.content_type,
        options.expires_at,
        resource,
    ]
    return "\n".join("" if f is None else str(f) for f in fields)
