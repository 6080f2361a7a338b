"""Escaping and encoding helpers for signed requests."""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import quote, quote_plus

__all__ = [
    "isodatetime",
    "path_escape",
    "policy_json",
    "query_escape",
    "strict_base64",
]


def path_escape(value: str, *, safe: str = "/") -> str:
    """Percent-escape a URL path.

    Spaces become ``%20`` and reserved characters such as ``?`` and ``#``
    are escaped. Characters in ``safe`` are left alone.
    """
    return quote(value, safe=safe)


def query_escape(value: object) -> str:
    """Percent-escape a query parameter name or value.

    Spaces become ``+`` and every reserved character, including ``/``, is
    escaped.
    """
    return quote_plus(str(value), safe="")


def strict_base64(data: bytes) -> str:
    """Encode data as standard base64 with no embedded line breaks."""
    return base64.b64encode(data).decode("ascii")


def isodatetime(timestamp: datetime) -> str:
    """Format a timestamp in the ISO 8601 form used by POST policies.

    Parameters
    ----------
    timestamp
        Date and time to format.

    Returns
    -------
    str
        Date and time as ``YYYY-MM-DDTHH:MM:SSZ``.

    Raises
    ------
    ValueError
        The provided timestamp was not in UTC.
    """
    if timestamp.utcoffset() != timedelta(seconds=0):
        raise ValueError(f"datetime {timestamp} not in UTC")
    return timestamp.strftime("%Y-%m-%dT%H:%M:%SZ")


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return isodatetime(value)
    raise TypeError(f"Object of type {type(value).__name__} in policy")


def policy_json(policy: Mapping[str, Any]) -> str:
    """Serialize a POST policy document.

    The output is compact and keeps the key order of the mapping, so the same
    policy always serializes to the same string.

    Parameters
    ----------
    policy
        Policy document. `~datetime.datetime` values anywhere in it are
        converted with `isodatetime`.

    Returns
    -------
    str
        JSON encoding of the policy.
    """
    return json.dumps(
        dict(policy),
        separators=(",", ":"),
        ensure_ascii=False,
        default=_json_default,
    )
