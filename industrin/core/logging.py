# industrin/core/logging.py
import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict, Optional

_LOGGING_CONFIGURED = False

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": "industrin",
        }

        for field in ("trace_id", "claim_id", "company_id"):
            if hasattr(record, field):
                log_record[field] = getattr(record, field)

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure the root logger once (LOG_LEVEL / LOG_FORMAT=text|json).

    Safe to call multiple times – subsequent calls are no-ops.
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    fmt_name = (fmt or os.getenv("LOG_FORMAT", "text")).lower()

    handler = logging.StreamHandler(sys.stdout)
    if fmt_name == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    _LOGGING_CONFIGURED = True
