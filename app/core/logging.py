"""Key=value logging for the SmartSDLC API.

Lines look like::

    ts=2024-05-01 12:00:00,123 level=INFO logger=app.api.requirements msg="Stored 3 requirements" run_id=... Testing=1

Values containing spaces or quotes are quoted so lines stay machine-splittable.
"""

import logging
import sys
from typing import Any

_BASE_FIELDS = ("ts", "level", "logger", "func", "msg")


def _render(value: Any) -> str:
    text = str(value)
    if not text or any(c in text for c in ' "='):
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return text


class StructuredFormatter(logging.Formatter):
    """Render records as ``key=value`` pairs, followed by any traceback."""

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = dict(
            zip(
                _BASE_FIELDS,
                (
                    self.formatTime(record, self.datefmt),
                    record.levelname,
                    record.name,
                    record.funcName,
                    record.getMessage(),
                ),
            )
        )

        run_id = getattr(record, "run_id", None)
        if run_id is not None:
            fields["run_id"] = run_id

        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            for key, value in extra_data.items():
                # Context never overwrites the base fields
                fields.setdefault(key, value)

        line = " ".join(f"{key}={_render(value)}" for key, value in fields.items())
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _resolve_level() -> int:
    try:
        from app.core.config import get_settings

        settings = get_settings()
    except Exception:
        # No valid settings yet (e.g. OPENAI_API_KEY unset at import time)
        return logging.INFO

    if settings.LOG_LEVEL:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if settings.SDLC_ENV == "dev" else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger writing structured lines to stdout.

    The level comes from LOG_LEVEL, or DEBUG in the dev environment and INFO
    elsewhere.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.setLevel(_resolve_level())

    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """
    Log ``msg`` with keyword context appended as fields.

    ``run_id`` gets its own slot so upload runs can be followed across lines.
    """
    run_id = kwargs.pop("run_id", None)
    extra: dict[str, Any] = {"extra_data": kwargs}
    if run_id is not None:
        extra["run_id"] = run_id
    logger.log(level, msg, extra=extra)
