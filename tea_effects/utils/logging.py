"""
Root-logger wiring for the ``tea-effects`` command line.

Only the CLI calls ``configure_logging``, once per command and before any
tables are loaded. Everything under ``tea_effects`` logs through
``logging.getLogger(__name__)``, so a program that embeds the engine keeps
whatever handlers it installed itself.

Handlers write to stderr and, when ``log_file`` is set, to that file.
stdout carries nothing but the command's own output, which keeps
``tea-effects analyze ... | jq`` working at any log level.

With ``json_format = true`` each record becomes a single line such as::

    {"ts": "2026-10-18T09:12:44Z", "level": "DEBUG",
     "logger": "tea_effects.engine", "msg": "Calculated 'Gyokuro': ..."}

printed without the line break.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tea_effects.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Present on a bare LogRecord; keys outside this set arrived through ``extra=``.
_BUILTIN_RECORD_KEYS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class JsonLineFormatter(logging.Formatter):
    """Render a record as one JSON object: ts, level, logger, msg.

    ``exc`` is added when the record carries a traceback. Keys passed
    through ``extra=`` (say ``extra={"tea": "Sencha"}``) sit alongside
    the fixed ones; values json cannot encode are written via ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line: dict[str, Any] = {
            "ts": created.strftime(TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            line["exc"] = self.formatException(record.exc_info)
        line.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _BUILTIN_RECORD_KEYS and not key.startswith("_")
        )
        return json.dumps(line, default=str)


def build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonLineFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TIMESTAMP_FORMAT)


def _attach(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: "LoggingConfig") -> None:
    """Replace the root logger's handlers according to ``config``.

    The level name is matched case-insensitively. The directory holding
    ``log_file`` is created when missing.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter = build_formatter(config.json_format)

    console = _attach(logging.StreamHandler(sys.stderr), level, formatter)
    handlers: list[logging.Handler] = [console]
    if config.log_file:
        path = Path(config.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _attach(logging.FileHandler(path, encoding="utf-8"), level, formatter)
        )

    logging.basicConfig(level=level, handlers=handlers, force=True)
