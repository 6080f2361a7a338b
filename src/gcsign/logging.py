"""structlog configuration for the signing service."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Any, Self

import structlog
from structlog.stdlib import add_log_level
from structlog.types import EventDict

__all__ = [
    "SECRET_FIELDS",
    "LogLevel",
    "Profile",
    "add_log_severity",
    "configure_logging",
    "redact_secrets",
]

SECRET_FIELDS = frozenset({"private_key", "signature", "signing_key"})
"""Log fields whose values are replaced by `redact_secrets`."""


class Profile(Enum):
    """How log messages are rendered."""

    production = "production"
    """One JSON object per message."""

    development = "development"
    """Colored key-value output for a terminal."""


class LogLevel(Enum):
    """Standard library log level, parsed case-insensitively."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def _missing_(cls, value: Any) -> Self | None:
        if not isinstance(value, str):
            return None
        return cls.__members__.get(value.upper())


def add_log_severity(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Record the level of a message under the ``severity`` key.

    Cloud Logging reads ``severity`` rather than ``level`` from JSON logs.
    """
    severity = add_log_level(logger, method_name, {})["level"]
    event_dict["severity"] = severity
    return event_dict


def redact_secrets(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Replace signatures and key material in the event dict.

    Intended for use as a structlog processor, so that a signed URL cannot be
    reconstructed from the logs even if a caller binds one of the
    `SECRET_FIELDS` to the logger.
    """
    for key in SECRET_FIELDS & event_dict.keys():
        event_dict[key] = "<redacted>"
    return event_dict


def configure_logging(
    *,
    name: str = "gcsign",
    profile: Profile | str = Profile.production,
    log_level: LogLevel | str = LogLevel.INFO,
) -> None:
    """Send structlog output for a logger to standard output.

    Parameters
    ----------
    name
        Name of the standard library logger to configure. The signing
        service logs to ``gcsign``.
    profile
        The name of the application profile. In ``development``, messages
        are formatted for the terminal. In ``production``, each message is a
        JSON object. May be given as a `Profile` enum value or a string.
    log_level
        The Python log level. May be given as a `LogLevel` enum or a
        case-insensitive string.

    Examples
    --------
    .. code-block:: python

       import structlog
       from gcsign.logging import configure_logging


       configure_logging(name="gcsign", log_level="debug")
       logger = structlog.get_logger("gcsign")
    """
    log_level = LogLevel(log_level)
    profile = Profile(profile)

    stream_handler = logging.StreamHandler(stream=sys.stdout)
    stream_handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger(name)
    logger.handlers = []
    logger.addHandler(stream_handler)
    logger.setLevel(log_level.value)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        redact_secrets,
    ]
    if profile == Profile.production:
        processors.append(add_log_severity)
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.stdlib.add_log_level)
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
