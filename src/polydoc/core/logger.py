import logging
import sys
import contextvars
from typing import Optional

# Context variable to carry the current index operation id across the call chain
_OP_ID: contextvars.ContextVar[str] = contextvars.ContextVar("op_id", default="-")


class _OperationFilter(logging.Filter):
    """Logging filter that injects the op_id from contextvars into the record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.op_id = _OP_ID.get()
        return True


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | op=%(op_id)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_root_logger(level: str = "INFO") -> None:
    """
    Configure the root logger and the polydoc-specific logger.

    Root logger stays at INFO to suppress library noise (httpx, httpcore).
    Only polydoc namespace logs are set to the requested level.

    Args:
        level: Log level for polydoc logs (DEBUG, INFO, WARNING, ERROR).

    Safe to call multiple times; it will not duplicate handlers (idempotent).
    """
    root = logging.getLogger()
    polydoc_logger = logging.getLogger("polydoc")

    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and any(isinstance(f, _OperationFilter) for f in h.filters):
            # Already configured; just update polydoc logger level
            polydoc_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter())
    handler.addFilter(_OperationFilter())
    handler.setLevel(logging.DEBUG)
    root.addHandler(handler)
    root.setLevel(logging.INFO)

    polydoc_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str = "polydoc") -> logging.Logger:
    """
    Get a module-specific logger under the polydoc namespace.

    Handlers are not touched here; call configure_root_logger() once at startup.
    """
    if name != "polydoc" and not name.startswith("polydoc."):
        name = f"polydoc.{name}"
    return logging.getLogger(name)


def push_op_id(op_id: Optional[str]) -> Optional[contextvars.Token]:
    """Set the current operation id in context and return a token for later reset."""
    if not op_id:
        return None
    return _OP_ID.set(op_id)


def reset_op_id(token: Optional[contextvars.Token]) -> None:
    """Reset the operation id context using the provided token (if any)."""
    if token is None:
        return
    _OP_ID.reset(token)
