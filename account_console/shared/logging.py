"""Logging setup for the account console.

- Log level and output from environment variables
- Redaction of private keys, keyfile ciphertext and passwords
- Mapping of raw errors to short messages for notifications
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
    log_filename: str = "account-console.log"
    json_format: bool = False
    sanitize_sensitive: bool = True

    @classmethod
    def from_environment(cls, log_dir: Path | None = None) -> "LoggingConfig":
        env_level = os.getenv("ACCOUNT_CONSOLE_LOG_LEVEL", "INFO").upper()
        try:
            log_level = LogLevel(env_level)
        except ValueError:
            log_level = LogLevel.INFO

        log_to_stdout = os.getenv("ACCOUNT_CONSOLE_LOG_STDOUT", "").lower() in (
            "1",
            "true",
            "yes",
        )
        json_format = os.getenv("ACCOUNT_CONSOLE_LOG_FORMAT", "human").lower() == "json"

        return cls(
            log_level=log_level,
            log_to_stdout=log_to_stdout,
            log_dir=log_dir,
            json_format=json_format,
        )


SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(r"(password['\"]?\s*[:=]\s*['\"]?)([^\s'\",}]+)", re.IGNORECASE),
        r"\1[REDACTED]",
    ),
    (
        re.compile(
            r"(ciphertext['\"]?\s*[:=]\s*['\"]?)([A-Za-z0-9_\-+/=]{20,})",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    (
        re.compile(r"\b(0x)?[A-Fa-f0-9]{64}\b"),
        "[KEY_REDACTED]",
    ),
]

ADDRESS_PATTERN = re.compile(r"\b0x[A-Fa-f0-9]{40}\b")


def sanitize_message(message: str, preserve_addresses: bool = True) -> str:
    if not message:
        return message

    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)

    if not preserve_addresses:
        sanitized = ADDRESS_PATTERN.sub("[ADDRESS_REDACTED]", sanitized)

    return sanitized


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in data.items():
        if any(word in key.lower() for word in ("password", "secret", "ciphertext")):
            result[key] = "[REDACTED]"
        elif isinstance(value, str):
            result[key] = sanitize_message(value)
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value)
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
        error_pattern="invalid password",
        user_message="The password does not unlock this account.",
        suggest_action="Use the password chosen when the account was created.",
    ),
    ErrorMapping(
        error_pattern="timeout|timed out",
        user_message="The certification service did not respond in time.",
        suggest_action="Try again later or check your network connection.",
    ),
    ErrorMapping(
        error_pattern="connection error|connection refused|cannot connect",
        user_message="Unable to reach the certification service.",
        suggest_action="Check the configured certification URL.",
    ),
    ErrorMapping(
        error_pattern="account not found",
        user_message="This account is no longer in the account list.",
    ),
    ErrorMapping(
        error_pattern="hardware accounts",
        user_message="This action is not available for hardware accounts.",
    ),
    ErrorMapping(
        error_pattern="permission denied|no such file|read-only",
        user_message="The exported file could not be written.",
        suggest_action="Check the export directory permissions.",
    ),
    ErrorMapping(
        error_pattern=r"http \d{3}",
        user_message="The certification service returned an error.",
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
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            log_data["context"] = sanitize_dict(context) if self.sanitize else context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.sanitize:
            log_data["message"] = sanitize_message(log_data["message"])
            if "exception" in log_data:
                log_data["exception"] = sanitize_message(log_data["exception"])

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
        text = super().format(record)
        return sanitize_message(text) if self.sanitize else text


class ContextAdapter(logging.LoggerAdapter):
    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None):
        super().__init__(logger, context or {})

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        kwargs["extra"] = {"context": {**(self.extra or {}), **extra.get("context", {})}}
        return msg, kwargs

    def with_context(self, **kwargs: Any) -> "ContextAdapter":
        return ContextAdapter(self.logger, {**(self.extra or {}), **kwargs})


_logging_initialized = False


def setup_logging(config: LoggingConfig | None = None) -> None:
    global _logging_initialized

    if _logging_initialized:
        return

    if config is None:
        config = LoggingConfig.from_environment()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.value))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    def make_formatter() -> logging.Formatter:
        if config.json_format:
            return StructuredFormatter(sanitize=config.sanitize_sensitive)
        return HumanReadableFormatter(sanitize=config.sanitize_sensitive)

    if config.log_to_file:
        log_dir = config.log_dir or Path.home() / ".config" / "account-console"
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            log_dir / config.log_filename, mode="a", encoding="utf-8"
        )
        file_handler.setFormatter(make_formatter())
        root_logger.addHandler(file_handler)

    # stdout belongs to the TUI unless explicitly requested
    if config.log_to_stdout:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(make_formatter())
        root_logger.addHandler(stdout_handler)

    _logging_initialized = True


def get_logger(name: str, context: dict[str, Any] | None = None) -> ContextAdapter:
    return ContextAdapter(logging.getLogger(name), context)


__all__ = [
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
