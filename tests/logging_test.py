"""Tests for logging configuration and signing service logs."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from gcsign import (
    SignedURLService,
    SignerSettings,
    SigningOptions,
    StaticCredentialSource,
)
from gcsign.logging import LogLevel, Profile, configure_logging


def test_configure_logging(caplog: pytest.LogCaptureFixture) -> None:
    configure_logging(
        name="myapp", profile=Profile.production, log_level=LogLevel.INFO
    )
    logger = structlog.get_logger("myapp")
    logger = logger.bind(answer=42)
    logger.info("Hello world")
    logger.debug("Not shown")

    assert len(caplog.record_tuples) == 1
    name, _, message = caplog.record_tuples[0]
    assert name == "myapp"
    assert json.loads(message) == {
        "answer": 42,
        "event": "Hello world",
        "logger": "myapp",
        "severity": "info",
    }


def test_development_profile(caplog: pytest.LogCaptureFixture) -> None:
    configure_logging(name="myapp", profile="development", log_level="info")
    logger = structlog.get_logger("myapp")
    logger.info("Hello world", answer=42)

    _, _, message = caplog.record_tuples[0]
    assert "Hello world" in message
    assert "answer" in message
    assert "42" in message


def test_redact_secrets(caplog: pytest.LogCaptureFixture) -> None:
    configure_logging(name="myapp")
    logger = structlog.get_logger("myapp")
    logger.warning("Oops", signature="c2lnbmF0dXJl", private_key="key")

    _, _, message = caplog.record_tuples[0]
    assert json.loads(message) == {
        "event": "Oops",
        "logger": "myapp",
        "private_key": "<redacted>",
        "severity": "warning",
        "signature": "<redacted>",
    }


def test_service_logging(
    caplog: pytest.LogCaptureFixture, private_key_pem: str
) -> None:
    configure_logging(name="gcsign", log_level=LogLevel.DEBUG)
    service = SignedURLService(
        StaticCredentialSource("test@example.com", private_key_pem)
    )
    options = SigningOptions(method="PUT", expires_at=1700000000)
    service.signed_url("gs://my-bucket/path/to/file.txt", options)
    service.post_object("gs://my-bucket/uploads/a.png")

    messages = [
        json.loads(m) for n, _, m in caplog.record_tuples if n == "gcsign"
    ]
    assert messages == [
        {
            "bucket": "my-bucket",
            "event": "Generated signed URL",
            "expires_at": 1700000000,
            "issuer": "test@example.com",
            "logger": "gcsign",
            "method": "PUT",
            "object": "path/to/file.txt",
            "severity": "debug",
        },
        {
            "bucket": "my-bucket",
            "event": "Generated signed POST policy",
            "issuer": "test@example.com",
            "logger": "gcsign",
            "object": "uploads/a.png",
            "severity": "debug",
        },
    ]


def test_logging_from_settings(
    caplog: pytest.LogCaptureFixture, private_key_pem: str
) -> None:
    options = SigningOptions(
        expires_at=1700000000,
        issuer="test@example.com",
        signing_key=private_key_pem,
    )

    settings = SignerSettings(log_level=LogLevel.DEBUG)
    service = SignedURLService.from_settings(settings)
    assert logging.getLogger("gcsign").level == logging.DEBUG
    service.signed_url("gs://my-bucket/file.txt", options)

    assert len(caplog.record_tuples) == 1
    name, level, message = caplog.record_tuples[0]
    assert (name, level) == ("gcsign", logging.DEBUG)
    assert json.loads(message) == {
        "bucket": "my-bucket",
        "event": "Generated signed URL",
        "expires_at": 1700000000,
        "issuer": "test@example.com",
        "logger": "gcsign",
        "method": "GET",
        "object": "file.txt",
        "severity": "debug",
    }

    caplog.clear()
    settings = SignerSettings(log_level=LogLevel.WARNING)
    service = SignedURLService.from_settings(settings)
    assert logging.getLogger("gcsign").level == logging.WARNING
    service.signed_url("gs://my-bucket/file.txt", options)
    assert caplog.record_tuples == []

    # The development profile renders for the terminal instead of JSON.
    settings = SignerSettings(
        log_level=LogLevel.DEBUG, profile=Profile.development
    )
    service = SignedURLService.from_settings(settings)
    service.signed_url("gs://my-bucket/file.txt", options)
    _, _, message = caplog.record_tuples[0]
    assert "Generated signed URL" in message
    with pytest.raises(json.JSONDecodeError):
        json.loads(message)
