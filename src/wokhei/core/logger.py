"""
Structured logging with key=value and JSON output support.

Wraps the standard library ``logging`` module. Every record is an event
name plus keyword fields:

```python
from wokhei.core.logger import Logger

logger = Logger("query")
logger.info("page_fetched", size=500, until=1700000000)
# debug-level output on stderr: info query page_fetched size=500 until=1700000000
```

Two renderings are supported: key=value pairs through
[StructuredFormatter][wokhei.core.logger.StructuredFormatter] (default) and
one JSON object per line (``json_output=True``).

Logs always go to stderr. Standard output is reserved for the JSON result
envelope printed by the CLI, so a log line can never corrupt a command's
machine-readable result.
"""

from __future__ import annotations

import datetime
import json
import logging
import sys
from typing import Any, ClassVar, TextIO


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Format a dictionary as space-separated key=value pairs.

    Values longer than ``max_value_length`` are truncated. Values that are
    empty or contain whitespace, ``=`` or quotes are escaped and wrapped in
    double quotes.

    Returns:
        Formatted string, e.g. ``' kind=9998 name="my list"'``, or ``""``
        when *kwargs* is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for k, v in kwargs.items():
        s = _truncate(str(v), max_value_length)
        if not s or any(c in s for c in " \t\n=\"'"):
            escaped = s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
            parts.append(f'{k}="{escaped}"')
        else:
            parts.append(f"{k}={s}")

    return prefix + " ".join(parts)


def _truncate(value: str, max_length: int | None) -> str:
    if max_length and len(value) > max_length:
        return value[:max_length] + f"...<truncated {len(value) - max_length} chars>"
    return value


class StructuredFormatter(logging.Formatter):
    """Render records as ``level name message key=value ...``.

    Structured fields are read from the ``structured_kv`` extra attached by
    [Logger][wokhei.core.logger.Logger]. Records from plain
    ``logging.getLogger()`` calls (e.g. the relay client in
    [wokhei.utils.protocol][]) have no such field and are emitted with the
    same prefix and no pairs.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        extra: dict[str, Any] = getattr(record, "structured_kv", {})
        if extra:
            line += format_kv_pairs(extra, max_value_length=None)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class Logger:
    """Structured logger taking an event name and keyword fields.

    Mirrors the standard logging methods (``debug`` ... ``exception``) with
    an added ``**kwargs`` carrying the structured fields.

    Args:
        name: Logger name, passed to ``logging.getLogger()``. Names are
            prefixed with ``wokhei.`` so one level setting covers the package.
        json_output: Emit one JSON object per record instead of handing the
            fields to [StructuredFormatter][wokhei.core.logger.StructuredFormatter].
        max_value_length: Per-value truncation length (default 1000).
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000
    _NAMESPACE: ClassVar[str] = "wokhei"

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
    ) -> None:
        if not name.startswith(self._NAMESPACE):
            name = f"{self._NAMESPACE}.{name}"
        self._logger = logging.getLogger(name)
        self._json_output = json_output
        self._max_value_length = (
            self._DEFAULT_MAX_VALUE_LENGTH if max_value_length is None else max_value_length
        )

    @property
    def name(self) -> str:
        return self._logger.name

    def _emit(
        self, level: int, msg: str, kwargs: dict[str, Any], *, exc_info: bool = False
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = {k: _truncate(str(v), self._max_value_length) for k, v in kwargs.items()}
        if self._json_output:
            payload = {
                "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
                "level": logging.getLevelName(level).lower(),
                "logger": self._logger.name,
                "message": msg,
                **fields,
            }
            self._logger.log(level, json.dumps(payload, default=str), exc_info=exc_info)
        else:
            self._logger.log(level, msg, extra={"structured_kv": fields}, exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._emit(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._emit(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._emit(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._emit(logging.ERROR, msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log at ERROR level with the active exception's traceback."""
        self._emit(logging.ERROR, msg, kwargs, exc_info=True)


def setup_logging(level: str = "WARNING", *, stream: TextIO | None = None) -> logging.Handler:
    """Install a [StructuredFormatter][wokhei.core.logger.StructuredFormatter] on the root logger.

    Args:
        level: One of ``DEBUG``, ``INFO``, ``WARNING``, ``ERROR``.
        stream: Output stream, ``sys.stderr`` by default.

    A handler installed by an earlier call is replaced, not duplicated.

    Returns:
        The installed handler (so tests and embedding callers can remove it).
    """
    for existing in list(logging.root.handlers):
        if isinstance(existing.formatter, StructuredFormatter):
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper()))
    return handler
