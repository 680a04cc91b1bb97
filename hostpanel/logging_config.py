"""
Structured Logging Configuration

Features:
  - JSON-formatted logs for centralized log collection
  - Request ID and acting account tracking across the request lifecycle
  - Secret masking (password, token, secret)
  - Environment-aware: JSON in production, human-readable in dev
"""

import json
import logging
import re
import sys
import uuid
from contextvars import ContextVar
from typing import Any

from hostpanel.config import settings

# ── Context variables for request tracking ──
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")
account_id_ctx: ContextVar[str] = ContextVar("account_id", default="-")


def generate_request_id() -> str:
    return str(uuid.uuid4())[:8]


# ═══════════════════════════════════════════
#  Secret Masking
# ═══════════════════════════════════════════

_REDACT_PATTERNS = [
    (re.compile(r'("?password"?\s*[:=]\s*)"[^"]*"', re.I), r'\1"***"'),
    (re.compile(r'("?passwd"?\s*[:=]\s*)"[^"]*"', re.I), r'\1"***"'),
    (re.compile(r'("?token"?\s*[:=]\s*)"[^"]*"', re.I), r'\1"***"'),
    (re.compile(r'("?secret"?\s*[:=]\s*)"[^"]*"', re.I), r'\1"***"'),
    (re.compile(r'(://[^:/@\s]+:)[^@\s]+@'), r'\1***@'),
]


def mask_secrets(text: str) -> str:
    """Mask credentials in log messages."""
    for pattern, replacement in _REDACT_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


# ═══════════════════════════════════════════
#  Formatters
# ═══════════════════════════════════════════

class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter for production."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S.000Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": mask_secrets(record.getMessage()),
            "request_id": request_id_ctx.get("-"),
            "account_id": account_id_ctx.get("-"),
        }

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Remove empty context
        log_entry = {k: v for k, v in log_entry.items() if v and v != "-"}

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """Readable formatter for development."""

    FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-24s | [%(request_id)s] %(message)s"

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = request_id_ctx.get("-")
        return mask_secrets(super().format(record))


# ═══════════════════════════════════════════
#  Setup
# ═══════════════════════════════════════════

def setup_logging() -> None:
    """Configure application-wide logging."""
    root = logging.getLogger()

    # Clear existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if settings.is_production or settings.is_staging:
        handler.setFormatter(JSONFormatter())
        root.setLevel(logging.INFO)
    else:
        handler.setFormatter(
            HumanFormatter(HumanFormatter.FORMAT, datefmt="%H:%M:%S")
        )
        root.setLevel(logging.DEBUG)

    root.addHandler(handler)

    # Quiet noisy third-party loggers
    for name in ("uvicorn.access", "sqlalchemy.engine", "celery.worker", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
