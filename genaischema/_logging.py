"""
Structured logging for genaischema.

All records go through the single ``genaischema`` logger, each tagged with a
scope naming the stage that emitted it:

    schema    reflection and conversion (debug only)
    generate  request preparation and candidate streams
    client    SDK calls

JSON output follows the OpenTelemetry Logging Data Model. Well-known context
keys are renamed to dotted attribute names (``model_id`` becomes
``gen_ai.request.model``, ``path`` becomes ``schema.path``); any other
``extra`` key is kept as is.

Usage::

    from ._logging import scoped_logger

    log = scoped_logger("generate")
    log.debug("Candidates received", extra={"candidate_count": 3})

Environment::

    GENAISCHEMA_LOG_LEVEL=debug|info|warn|error|fatal|off (default: warn)
    GENAISCHEMA_LOG_FORMAT=json|human (default: human if tty, json if piped)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from typing import Any

from ._version import __version__

__all__ = ["logger", "setup_logging", "scoped_logger"]

# OpenTelemetry severity text
_SEVERITY = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}

_OFF = logging.CRITICAL + 10

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "off": _OFF,
}

# extra key -> JSON attribute name
_ATTRIBUTE_NAMES = {
    "model_id": "gen_ai.request.model",
    "candidate_count": "candidate.count",
    "index": "candidate.index",
    "finish_reason": "candidate.finish_reason",
    "path": "schema.path",
}

# Context shown after the message in human output
_HUMAN_CONTEXT = ("path", "index", "candidate_count")

# Attributes every LogRecord carries, plus ones the formatters set themselves
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "scope",
}


def _scope(record: logging.LogRecord) -> str:
    return getattr(record, "scope", None) or "genaischema"


def _package_path(pathname: str) -> str:
    """Path relative to the package directory, e.g. ``generate/sync.py``."""
    marker = "genaischema/"
    if marker in pathname:
        return pathname[pathname.rindex(marker) + len(marker) :]
    return pathname


def _with_location(record: logging.LogRecord) -> bool:
    return record.levelno <= logging.DEBUG or record.levelno >= logging.ERROR


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_FIELDS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One OpenTelemetry log record per line."""

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        # RFC3339 with nanosecond precision
        timestamp = f"{dt:%Y-%m-%dT%H:%M:%S}.{dt.microsecond * 1000:09d}Z"

        attributes: dict[str, Any] = {"scope": _scope(record)}
        for key, value in _context(record).items():
            attributes[_ATTRIBUTE_NAMES.get(key, key)] = value
        if _with_location(record):
            attributes["code.filepath"] = _package_path(record.pathname)
            attributes["code.lineno"] = record.lineno

        return json.dumps(
            {
                "timestamp": timestamp,
                "severityText": _SEVERITY.get(record.levelno, "INFO"),
                "body": record.getMessage(),
                "attributes": attributes,
                "resource": {"service.name": "genaischema", "service.version": __version__},
            },
            separators=(",", ":"),
            default=str,
        )


class HumanFormatter(logging.Formatter):
    """
    Single-line terminal output::

        12:00:01 WARN  [generate] Candidate failed to decode index=1

    The model name, when present, follows the message in parentheses.
    """

    _RESET = "\x1b[0m"
    _DIM = "\x1b[2m"
    _RED = "\x1b[31m"
    _YELLOW = "\x1b[33m"
    _CYAN = "\x1b[36m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self._use_colors = use_colors

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{self._RESET}" if self._use_colors and color else text

    def _level_color(self, levelno: int) -> str:
        if levelno >= logging.ERROR:
            return self._RED
        if levelno >= logging.WARNING:
            return self._YELLOW
        if levelno <= logging.DEBUG:
            return self._DIM
        return ""

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%H:%M:%S")
        severity = _SEVERITY.get(record.levelno, "INFO")

        line = [
            time_str,
            " ",
            self._paint(f"{severity:<5} ", self._level_color(record.levelno)),
            self._paint(f"[{_scope(record)}] ", self._CYAN),
            record.getMessage(),
        ]

        model_id = getattr(record, "model_id", None)
        if model_id:
            line.append(f" ({model_id})")
        for key in _HUMAN_CONTEXT:
            value = getattr(record, key, None)
            if value is not None:
                line.append(f" {key}={value}")

        if _with_location(record):
            where = f" [{_package_path(record.pathname)}:{record.lineno}]"
            line.append(self._paint(where, self._DIM))

        return "".join(line)


def _get_log_level() -> int:
    """Level from GENAISCHEMA_LOG_LEVEL (default warn)."""
    name = os.environ.get("GENAISCHEMA_LOG_LEVEL", "warn")
    return _LEVELS.get(name.lower(), logging.WARNING)


def _get_log_format() -> str:
    """Format from GENAISCHEMA_LOG_FORMAT, else human on a TTY and json otherwise."""
    fmt = os.environ.get("GENAISCHEMA_LOG_FORMAT")
    if fmt:
        return fmt.lower()
    return "human" if sys.stderr.isatty() else "json"


def _create_handler(fmt: str | None = None) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if (fmt or _get_log_format()).lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(HumanFormatter(use_colors=sys.stderr.isatty()))
    return handler


logger = logging.getLogger("genaischema")


def _setup_default_handler() -> None:
    # An application that configured the logger first keeps its handlers
    if logger.handlers:
        return
    logger.addHandler(_create_handler())
    logger.setLevel(_get_log_level())


def setup_logging(
    level: str | int = "INFO",
    format: str | None = None,
) -> None:
    """
    Configure genaischema logging.

    Replaces any handlers on the ``genaischema`` logger with one stderr
    handler.

    Parameters
    ----------
    level : str or int, default "INFO"
        Level name ("DEBUG", "INFO", "WARN", "ERROR", "FATAL", "OFF") or a
        logging constant. Unknown names fall back to INFO.

    format : str, optional
        "json" or "human". Defaults to GENAISCHEMA_LOG_FORMAT, then TTY
        detection.

    Examples
    --------
    ::

        >>> import genaischema
        >>> genaischema.setup_logging("DEBUG", format="human")
    """
    if isinstance(level, str):
        level = _LEVELS.get(level.lower(), logging.INFO)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.addHandler(_create_handler(format))
    logger.setLevel(level)


class _ScopedLoggerAdapter(logging.LoggerAdapter):
    """Adds the fixed scope while keeping the call's own ``extra``."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def scoped_logger(scope: str) -> logging.LoggerAdapter:
    """Logger adapter that tags every record with ``scope``."""
    return _ScopedLoggerAdapter(logger, {"scope": scope})


_setup_default_handler()
