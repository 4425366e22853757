import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Optional
from cmdmanifest.config import settings

# Context variable to track run_id across calls
run_id_ctx: ContextVar[Optional[str]] = ContextVar("run_id", default=None)

# Structured fields the compiler attaches to diagnostics via `extra=`
CONTEXT_FIELDS = ("command", "parameter", "parameter_set_index")


def get_run_id() -> str:
    """Retrieve the current run_id or generate a new one if not set."""
    rid = run_id_ctx.get()
    if rid is None:
        rid = str(uuid.uuid4())
        run_id_ctx.set(rid)
    return rid


class RunIDFilter(logging.Filter):
    """Injects run_id into log records."""
    def filter(self, record):
        record.run_id = get_run_id()
        return True


class ContextFieldsFilter(logging.Filter):
    """Renders the compiler's context fields into a single `context` attribute."""
    def filter(self, record):
        parts = []
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                parts.append(f"{name}={value}")
        record.context = f" [{' '.join(parts)}]" if parts else ""
        return True


def configure_logging(level: str = "INFO"):
    """Configures the root logger with a standard format including run_id and context."""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers to avoid duplication
    if logger.handlers:
        logger.handlers.clear()

    # Diagnostics go to stderr so stdout stays a clean JSON document
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | [%(run_id)s] | %(name)s:%(funcName)s:%(lineno)d - %(message)s%(context)s"
    )
    handler.setFormatter(formatter)

    handler.addFilter(RunIDFilter())
    handler.addFilter(ContextFieldsFilter())

    logger.addHandler(handler)

    # Silence noisy libraries if needed
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# Initialize logging on import with configured settings
configure_logging(settings.LOG_LEVEL.upper())
logger = logging.getLogger("cmdmanifest")
