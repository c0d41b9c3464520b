"""Centralized logging configuration for Stellar Market.

This module provides:
- Log level and format selection from the environment
- Redaction of Stellar secret seeds before anything reaches a handler
- Mapping of Horizon result codes and transport errors to user-facing text
- Structured logging with context fields
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

DEFAULT_APP_DIR = Path.home() / ".config" / "stellar-market"


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LoggingConfig:
    log_level: LogLevel = LogLevel.INFO
    log_to_file: bool = True
    log_to_stdout: bool = False
    log_dir: Path | None = None
    log_filename: str = "market.log"
    json_format: bool = False
    sanitize_sensitive: bool = True

    @classmethod
    def from_environment(cls) -> "LoggingConfig":
        try:
            log_level = LogLevel(os.getenv("STELLAR_MARKET_LOG_LEVEL", "INFO").upper())
        except ValueError:
            log_level = LogLevel.INFO

        log_to_stdout = os.getenv("STELLAR_MARKET_LOG_STDOUT", "").lower() in (
            "1",
            "true",
            "yes",
        )
        json_format = os.getenv("STELLAR_MARKET_LOG_FORMAT", "human").lower() == "json"
        app_dir = os.getenv("STELLAR_MARKET_DIR")

        return cls(
            log_level=log_level,
            log_to_stdout=log_to_stdout,
            log_dir=Path(app_dir).expanduser() if app_dir else None,
            json_format=json_format,
        )


# Secret seeds are "S" followed by 55 base32 characters.
SECRET_SEED_PATTERN = re.compile(r"\bS[A-Z2-7]{55}\b")
PUBLIC_ADDRESS_PATTERN = re.compile(r"\bG[A-Z2-7]{55}\b")

SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(
            r"(secret(?:[_-]?key|[_-]?seed)?['\"]?\s*[:=]\s*['\"]?)([^\s'\",}]+)",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    (
        re.compile(r"(password['\"]?\s*[:=]\s*['\"]?)([^\s'\",}]+)", re.IGNORECASE),
        r"\1[REDACTED]",
    ),
    (SECRET_SEED_PATTERN, "[SEED_REDACTED]"),
]

SENSITIVE_KEYS = ("secret", "seed", "password", "private_key")


def sanitize_message(message: str, preserve_addresses: bool = True) -> str:
    if not message:
        return message

    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)

    if not preserve_addresses:
        sanitized = PUBLIC_ADDRESS_PATTERN.sub("[ADDRESS_REDACTED]", sanitized)

    return sanitized


def sanitize_dict(
    data: dict[str, Any], preserve_addresses: bool = True
) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in data.items():
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            result[key] = "[REDACTED]"
        elif isinstance(value, str):
            result[key] = sanitize_message(value, preserve_addresses)
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value, preserve_addresses)
        elif isinstance(value, list):
            result[key] = [
                sanitize_dict(item, preserve_addresses)
                if isinstance(item, dict)
                else sanitize_message(item, preserve_addresses)
                if isinstance(item, str)
                else item
                for item in value
            ]
        else:
            result[key] = value
    return result


@dataclass
class ErrorMapping:
    error_pattern: str
    user_message: str
    suggest_action: str | None = None


ERROR_MAPPINGS: list[ErrorMapping] = [
    ErrorMapping(
        error_pattern="timeout|timed out",
        user_message="Horizon did not respond in time.",
        suggest_action="Try again later or check your network connection.",
    ),
    ErrorMapping(
        error_pattern="connection refused|cannot connect|connection error",
        user_message="Unable to reach Horizon.",
        suggest_action="Check your internet connection and the Horizon URL.",
    ),
    ErrorMapping(
        error_pattern="op_underfunded|tx_insufficient_balance|insufficient balance",
        user_message="Your account does not hold enough XLM for this purchase.",
        suggest_action="Fund the account with Friendbot or remove items from the cart.",
    ),
    ErrorMapping(
        error_pattern="op_no_destination",
        user_message="A seller account does not exist on the network.",
        suggest_action="The seller must fund their account before receiving payments.",
    ),
    ErrorMapping(
        error_pattern="tx_bad_seq",
        user_message="The account sequence number changed while checking out.",
        suggest_action="Check out again to rebuild the transaction.",
    ),
    ErrorMapping(
        error_pattern="tx_too_late|tx_too_early",
        user_message="The transaction validity window has expired.",
        suggest_action="Check out again and sign within 30 seconds.",
    ),
    ErrorMapping(
        error_pattern="tx_insufficient_fee",
        user_message="The transaction fee is below the network minimum.",
        suggest_action="Wait for network load to drop and try again.",
    ),
    ErrorMapping(
        error_pattern="tx_bad_auth|bad signature|signature",
        user_message="The transaction signature was not accepted.",
        suggest_action="Make sure the connected wallet signs for this account.",
    ),
    ErrorMapping(
        error_pattern="rejected|declined",
        user_message="The wallet declined to sign the transaction.",
    ),
    ErrorMapping(
        error_pattern="rate limit|too many requests|429",
        user_message="Too many requests to Horizon.",
        suggest_action="Wait a moment and try again.",
    ),
    ErrorMapping(
        error_pattern="not found|404",
        user_message="The account was not found on the network.",
        suggest_action="Fund the account with Friendbot to create it.",
    ),
    ErrorMapping(
        error_pattern="network.*error|networkerror",
        user_message="A network error occurred.",
        suggest_action="Check your internet connection.",
    ),
]


def get_user_friendly_error(error: Exception | str) -> tuple[str, str | None]:
    error_lower = str(error).lower()

    for mapping in ERROR_MAPPINGS:
        if re.search(mapping.error_pattern, error_lower):
            return mapping.user_message, mapping.suggest_action

    return "An unexpected error occurred.", None


def format_error_for_user(error: Exception | str) -> str:
    user_message, suggestion = get_user_friendly_error(error)
    if suggestion:
        return f"{user_message} {suggestion}"
    return user_message


class StructuredFormatter(logging.Formatter):
    def __init__(self, sanitize: bool = True):
        super().__init__()
        self.sanitize = sanitize

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_message(message) if self.sanitize else message,
            "function": record.funcName,
            "line": record.lineno,
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            log_data["context"] = sanitize_dict(context) if self.sanitize else context

        if record.exc_info:
            exc_text = self.formatException(record.exc_info)
            log_data["exception"] = (
                sanitize_message(exc_text) if self.sanitize else exc_text
            )

        try:
            return json.dumps(log_data)
        except (TypeError, ValueError):
            return f"{log_data['timestamp']} - {record.name} - {record.levelname} - {log_data['message']}"


class HumanReadableFormatter(logging.Formatter):
    def __init__(self, sanitize: bool = True):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.sanitize = sanitize

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = getattr(record, "context", None)
        if isinstance(context, dict) and context:
            text = f"{text} {context}"
        return sanitize_message(text) if self.sanitize else text


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that carries a dict of context fields on every record."""

    def __init__(
        self,
        logger: logging.Logger,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(logger, context or {})

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = {**(self.extra or {}), **extra.get("context", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **kwargs: Any) -> "ContextAdapter":
        return ContextAdapter(self.logger, {**(self.extra or {}), **kwargs})


_logging_initialized = False


def _build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.json_format:
        return StructuredFormatter(sanitize=config.sanitize_sensitive)
    return HumanReadableFormatter(sanitize=config.sanitize_sensitive)


def setup_logging(config: LoggingConfig | None = None, force: bool = False) -> None:
    global _logging_initialized

    if _logging_initialized and not force:
        return

    if config is None:
        config = LoggingConfig.from_environment()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.value))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers: list[logging.Handler] = []

    if config.log_to_file:
        log_dir = config.log_dir or DEFAULT_APP_DIR
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(
                log_dir / config.log_filename, mode="a", encoding="utf-8"
            )
        )

    # Textual owns stdout while the app runs, so this is off by default.
    if config.log_to_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))

    formatter = _build_formatter(config)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    # urllib3 logs every request at DEBUG, including query strings.
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _logging_initialized = True


def get_logger(
    name: str,
    context: dict[str, Any] | None = None,
) -> ContextAdapter:
    return ContextAdapter(logging.getLogger(name), context)


__all__ = [
    "DEFAULT_APP_DIR",
    "LogLevel",
    "LoggingConfig",
    "ContextAdapter",
    "StructuredFormatter",
    "HumanReadableFormatter",
    "sanitize_message",
    "sanitize_dict",
    "get_user_friendly_error",
    "format_error_for_user",
    "setup_logging",
    "get_logger",
]
