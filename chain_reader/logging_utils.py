"""
JSON-lines logging for chain reads.

Traversals can touch thousands of blocks. Each record is written as a
single JSON object so the chain id, key_mr and depth attached by the
walker and fetcher arrive in log pipelines as fields, not text.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class StructuredJsonFormatter(logging.Formatter):
    """Render a record as ``{"timestamp", "level", "logger", "message", ...}``.

    Context passed through ``extra`` (``chain_id``, ``key_mr``, ``depth``)
    is copied in as top-level keys. Values that are not JSON-serialisable
    are stringified.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, _jsonable(value))
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_structured_logging(
    level: int = logging.INFO,
    logger_name: str | None = None,
) -> logging.Logger:
    """Send ``logger_name`` (root by default) to stderr as JSON lines.

    Existing handlers on that logger are replaced, so calling this twice
    does not duplicate output.
    """
    target = logging.getLogger(logger_name)
    for existing in list(target.handlers):
        target.removeHandler(existing)

    # stdout is reserved for command output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredJsonFormatter())
    target.addHandler(handler)
    target.setLevel(level)
    return target


class ChainLoggerAdapter(logging.LoggerAdapter):
    """Tags every record with the chain being read.

    Example:
        >>> log = ChainLoggerAdapter(logger, {"chain_id": chain_id})
        >>> log.debug("Visited block", extra={"key_mr": key_mr})
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **self.extra}
        return msg, kwargs
