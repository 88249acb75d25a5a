import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from servicequote.config import Settings, get_settings

# Context variables for the service and quote session being worked on
service_id_var: ContextVar[Optional[str]] = ContextVar("service_id", default=None)
session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)

_FORMAT_CONSOLE = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<blue>service_id={extra[service_id]}</blue> | <magenta>session_id={extra[session_id]}</magenta> | "
    "<level>{message}</level>"
)
_FORMAT_FILE = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | "
    "service_id={extra[service_id]} | session_id={extra[session_id]} | {message}"
)


def get_context_info() -> Dict[str, Any]:
    """Current logging context (only the values that are set)."""
    context = {}

    service_id = service_id_var.get()
    if service_id:
        context["service_id"] = service_id

    session_id = session_id_var.get()
    if session_id:
        context["session_id"] = session_id

    return context


def _inject_context(record) -> None:
    extra = record["extra"]
    extra.setdefault("service_id", service_id_var.get())
    extra.setdefault("session_id", session_id_var.get())


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure loguru sinks with context-aware formatting."""
    settings = settings or get_settings()

    logger.remove()
    logger.configure(patcher=_inject_context)

    logger.add(
        sys.stdout,
        format=_FORMAT_CONSOLE,
        level=settings.log_level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if not settings.log_to_file:
        return

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_dir / "servicequote.log",
        format=_FORMAT_FILE,
        level="DEBUG",
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        compression="zip",
    )

    logger.add(
        log_dir / "errors.log",
        format=_FORMAT_FILE,
        level="ERROR",
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        compression="zip",
    )


def get_logger(name: Optional[str] = None):
    """Logger for a module; service/session context is injected per record."""
    patched = logger.patch(_inject_context)
    if name:
        return patched.bind(component=name)
    return patched


def set_context(service_id: Optional[str] = None, session_id: Optional[str] = None):
    if service_id is not None:
        service_id_var.set(service_id)
    if session_id is not None:
        session_id_var.set(session_id)


def clear_context():
    service_id_var.set(None)
    session_id_var.set(None)


class LoggingContext:
    """Scoped service/session context; restores the previous values on exit."""

    def __init__(self, service_id: Optional[str] = None, session_id: Optional[str] = None):
        self.service_id = service_id
        self.session_id = session_id
        self._tokens = []

    def __enter__(self):
        if self.service_id is not None:
            self._tokens.append((service_id_var, service_id_var.set(self.service_id)))
        if self.session_id is not None:
            self._tokens.append((session_id_var, session_id_var.set(self.session_id)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []
