"""
Log output for the ``supplement-scorer`` commands.

The scoring and diagnosis code never configures logging; it only emits
records under the ``supplement_scorer.*`` loggers. The CLI calls
``configure_logging(config.logging)`` once per command, before any input
file is read.

Records the package emits
-------------------------
``supplement_scorer.scoring.engine``
    WARNING  ``Invalid score weights (...)`` when ``score()`` swaps in the
             all-50 fallback result for a malformed weight set.
    ERROR    ``Score calculation failed ...`` with traceback, for any other
             failure inside a calculator (also answered with the fallback).
    DEBUG    ``Scored product ...`` with total, completeness and gaps.
``supplement_scorer.diagnosis.personalization``
    DEBUG    ``Personalized weights ...`` after questionnaire adjustments.
``supplement_scorer.diagnosis.engine``
    DEBUG    ``Diagnosis for product ...`` with base, penalty and alerts.

Engine records carry ``product_id`` as an ``extra=`` field. The JSON line
format lifts it to a top-level key::

    {"ts": "2026-10-19T09:30:00Z", "level": "WARNING",
     "logger": "supplement_scorer.scoring.engine",
     "msg": "Invalid score weights (...); using fallback score.",
     "product_id": "vitc-1000"}

Everything goes to stderr. stdout is reserved for command output, which
``--json-output`` makes machine-readable.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from supplement_scorer.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes every LogRecord has; anything else arrived through ``extra=``.
_BUILTIN_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).strftime(TIMESTAMP_FORMAT)


class _JsonFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg``.

    ``exc`` holds the formatted traceback when present. Fields passed via
    ``extra=`` (``product_id`` from the engines) are appended as-is;
    Japanese text is written unescaped.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _BUILTIN_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str, ensure_ascii=False)


def _text_formatter() -> logging.Formatter:
    formatter = logging.Formatter(TEXT_FORMAT, datefmt=TIMESTAMP_FORMAT)
    # Timestamps are UTC to match the trailing "Z".
    formatter.converter = time.gmtime
    return formatter


def _handlers_for(config: "LoggingConfig") -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    return handlers


def configure_logging(config: "LoggingConfig") -> None:
    """Route ``supplement_scorer`` records per the ``[logging]`` config section.

    Replaces any handlers already on the root logger, so repeated CLI
    invocations in one process (as under ``CliRunner``) do not stack output.

    Args:
        config: ``level``, optional ``log_file`` (parent dirs are created)
            and ``json_format``.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    formatter = _JsonFormatter() if config.json_format else _text_formatter()
    handlers = _handlers_for(config)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
