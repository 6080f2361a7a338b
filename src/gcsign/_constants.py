"""Constants for request signing."""

from __future__ import annotations

from datetime import timedelta

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_EXPIRATION",
    "ENCRYPTION_KEY_PREFIX",
]

DEFAULT_BASE_URL = "https://storage.googleapis.com"
"""Base URL of the Cloud Storage XML API."""

DEFAULT_EXPIRATION = timedelta(seconds=300)
"""How long a signature is valid if the caller does not say."""

ENCRYPTION_KEY_PREFIX = "x-goog-encryption-key"
"""Headers starting with this are never included in the signed string.

This is a prefix match, so ``x-goog-encryption-key-sha256`` is also dropped.
"""
