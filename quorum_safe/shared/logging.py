"""Centralized logging configuration for quorum_safe.

This module provides:
- Configurable log levels (DEBUG for dev, INFO for prod)
- Sensitive data sanitization (private keys, signatures, passwords)
- User-friendly error message mapping for the multisig error taxonomy
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

from quorum_safe.shared.errors import (
    AlreadyInProgress,
    AlreadySubmitted,
    DuplicateKey,
    ExternalUnavailable,
    IdentityMismatch,
    InvalidPublicKey,
    InvalidThreshold,
    OperationNotFound,
    OperationRejected,
    PayloadMismatch,
    QuorumNotMet,
    TooManyKeys,
    UnknownSigner,
)


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


@dataclass
class LoggingConfig:
    log_level: LogLevel = LogLevel.INFO
    log_to_file: bool = False
    log_to_stdout: bool = False
    log_dir: Path | None = None
    log_filename: str = "quorum-safe.log"
    log_format: str = "human"
    sanitize_sensitive: bool = True
    include_context: bool = True

    @classmethod
    def from_environment(cls) -> "LoggingConfig":
        env_level = os.getenv("QUORUM_SAFE_LOG_LEVEL", "INFO").upper()
        try:
            log_level = LogLevel(env_level)
        except ValueError:
            log_level = LogLevel.INFO

        log_dir_env = os.getenv("QUORUM_SAFE_LOG_DIR")
        log_format = os.getenv("QUORUM_SAFE_LOG_FORMAT", "human").lower()

        return cls(
            log_level=log_level,
            log_to_file=log_dir_env is not None,
            log_to_stdout=_env_flag("QUORUM_SAFE_LOG_STDOUT"),
            log_dir=Path(log_dir_env) if log_dir_env else None,
            log_format="json" if log_format == "json" else "human",
        )


SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(
            r"(private[_-]?key['\"]?\s*[:=]\s*['\"]?)(0x)?([A-Fa-f0-9]{64})",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    (
        re.compile(
            r"(password['\"]?\s*[:=]\s*['\"]?)([^\s'\"]+)",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    (
        re.compile(r"\b[A-Fa-f0-9]{128}\b"),
        "[SIGNATURE_REDACTED]",
    ),
]

SENSITIVE_KEYS = ("private_key", "privatekey", "password", "secret", "signature")


def sanitize_message(message: str) -> str:
    if not message:
        return message

    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
            result[key] = "[REDACTED]"
        elif isinstance(value, str):
            result[key] = sanitize_message(value)
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value)
        elif isinstance(value, list):
            result[key] = [
                sanitize_dict(item)
                if isinstance(item, dict)
                else sanitize_message(item)
                if isinstance(item, str)
                else item
                for item in value
            ]
        else:
            result[key] = value
    return result


@dataclass
class ErrorMapping:
    error_type: type[Exception]
    user_message: str
    log_level: LogLevel = LogLevel.ERROR
    suggest_action: str | None = None


ERROR_MAPPINGS: list[ErrorMapping] = [
    ErrorMapping(
        error_type=InvalidThreshold,
        user_message="The threshold is not valid for this set of owners.",
        suggest_action="Choose a threshold between 1 and the number of owners.",
    ),
    ErrorMapping(
        error_type=DuplicateKey,
        user_message="The same owner public key was listed more than once.",
        suggest_action="Remove the duplicate key and try again.",
    ),
    ErrorMapping(
        error_type=InvalidPublicKey,
        user_message="An owner public key is not valid.",
        suggest_action="Public keys must be 32 bytes written as 64 hex characters.",
    ),
    ErrorMapping(
        error_type=TooManyKeys,
        user_message="Too many owners for one multisig account.",
        suggest_action="Reduce the number of owner keys.",
    ),
    ErrorMapping(
        error_type=UnknownSigner,
        user_message="This key is not an owner of the multisig account.",
        log_level=LogLevel.WARNING,
        suggest_action="Sign with one of the registered owner keys.",
    ),
    ErrorMapping(
        error_type=QuorumNotMet,
        user_message="Not enough owners have signed yet.",
        log_level=LogLevel.WARNING,
        suggest_action="Wait for more owners to sign, then try again.",
    ),
    ErrorMapping(
        error_type=AlreadyInProgress,
        user_message="Another operation is already waiting for signatures.",
        log_level=LogLevel.WARNING,
        suggest_action="Sign or finish the pending operation first.",
    ),
    ErrorMapping(
        error_type=OperationNotFound,
        user_message="No pending operation was found for this account.",
        log_level=LogLevel.WARNING,
        suggest_action="It may have been submitted already or never started.",
    ),
    ErrorMapping(
        error_type=PayloadMismatch,
        user_message="The pending operation differs from the one you expected.",
        log_level=LogLevel.WARNING,
        suggest_action="Fetch the pending operation again and review it.",
    ),
    ErrorMapping(
        error_type=IdentityMismatch,
        user_message="The stored owner set does not match this account address.",
        suggest_action="Check the account address and the creation nonce.",
    ),
    ErrorMapping(
        error_type=OperationRejected,
        user_message="The gateway rejected the request.",
        suggest_action="Review the request details; retrying will not help.",
    ),
    ErrorMapping(
        error_type=AlreadySubmitted,
        user_message="This operation was already submitted by another owner.",
        log_level=LogLevel.INFO,
        suggest_action=None,
    ),
    ErrorMapping(
        error_type=ExternalUnavailable,
        user_message="The gateway is currently unavailable.",
        log_level=LogLevel.WARNING,
        suggest_action="Try again later or check your network connection.",
    ),
]


def get_error_mapping(error: Exception) -> ErrorMapping | None:
    for mapping in ERROR_MAPPINGS:
        if isinstance(error, mapping.error_type):
            return mapping
    return None


def get_user_friendly_error(error: Exception | str) -> tuple[str, str | None]:
    if isinstance(error, Exception):
        mapping = get_error_mapping(error)
        if mapping is not None:
            return mapping.user_message, mapping.suggest_action
    return "An unexpected error occurred.", None


def format_error_for_user(error: Exception | str) -> str:
    user_message, suggestion = get_user_friendly_error(error)
    if suggestion:
        return f"{user_message} {suggestion}"
    return user_message


class StructuredFormatter(logging.Formatter):
    def __init__(self, sanitize: bool = True, include_context: bool = True):
        super().__init__()
        self.sanitize = sanitize
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            log_data["module"] = record.module
            log_data["function"] = record.funcName
            log_data["line"] = record.lineno

        extra_data = getattr(record, "context", None)
        if extra_data and isinstance(extra_data, dict):
            if self.sanitize:
                extra_data = sanitize_dict(extra_data)
            log_data["context"] = extra_data

        if record.exc_info:
            exc_text = self.formatException(record.exc_info)
            if self.sanitize:
                exc_text = sanitize_message(exc_text)
            log_data["exception"] = exc_text

        if self.sanitize:
            log_data["message"] = sanitize_message(log_data["message"])

        try:
            return json.dumps(log_data)
        except (TypeError, ValueError):
            return f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"


class HumanReadableFormatter(logging.Formatter):
    def __init__(self, sanitize: bool = True):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.sanitize = sanitize

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        context = getattr(record, "context", None)
        if context and isinstance(context, dict):
            if self.sanitize:
                context = sanitize_dict(context)
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            formatted = f"{formatted} [{pairs}]"
        if self.sanitize:
            formatted = sanitize_message(formatted)
        return formatted


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that carries a context dict into every record."""

    def __init__(
        self,
        logger: logging.Logger,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(logger, context or {})

    def process(
        self,
        msg: str,
        kwargs: dict[str, Any],
    ) -> tuple[str, dict[str, Any]]:
        extra = dict(kwargs.get("extra", {}))
        context = {**(self.extra or {}), **extra.get("context", {})}
        if context:
            extra["context"] = context
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **kwargs: Any) -> "ContextAdapter":
        new_context = {**(self.extra or {}), **kwargs}
        return ContextAdapter(self.logger, new_context)


_logging_initialized = False


def _build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.log_format == "json":
        return StructuredFormatter(
            sanitize=config.sanitize_sensitive,
            include_context=config.include_context,
        )
    return HumanReadableFormatter(sanitize=config.sanitize_sensitive)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Attach handlers to the ``quorum_safe`` logger once per process."""
    global _logging_initialized

    if _logging_initialized:
        return

    if config is None:
        config = LoggingConfig.from_environment()

    package_logger = logging.getLogger("quorum_safe")
    package_logger.setLevel(getattr(logging, config.log_level.value))

    handlers: list[logging.Handler] = []

    if config.log_to_file:
        if config.log_dir is None:
            config.log_dir = Path.home() / ".quorum-safe"
        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = config.log_dir / config.log_filename
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    if config.log_to_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(_build_formatter(config))
        package_logger.addHandler(handler)

    _logging_initialized = True


def get_logger(
    name: str,
    context: dict[str, Any] | None = None,
) -> ContextAdapter:
    if not _logging_initialized:
        setup_logging()

    logger = logging.getLogger(name)
    return ContextAdapter(logger, context)


def log_error(logger: logging.Logger | ContextAdapter, error: Exception) -> None:
    """Log a quorum_safe error at the level its mapping assigns."""
    mapping = get_error_mapping(error)
    level = mapping.log_level if mapping else LogLevel.ERROR
    logger.log(getattr(logging, level.value), "%s", error)


__all__ = [
    "LogLevel",
    "LoggingConfig",
    "ContextAdapter",
    "StructuredFormatter",
    "HumanReadableFormatter",
    "ErrorMapping",
    "sanitize_message",
    "sanitize_dict",
    "get_error_mapping",
    "get_user_friendly_error",
    "setup_logging",
    "get_logger",
    "log_error",
    "format_error_for_user",
]
