import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from app.config import Settings, get_settings

# Context variables voor quote en project IDs
quote_id_var: ContextVar[Optional[str]] = ContextVar("quote_id", default=None)
project_id_var: ContextVar[Optional[str]] = ContextVar("project_id", default=None)

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<magenta>quote_id={extra[quote_id]}</magenta> | <level>{message}</level>"
)
_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | "
    "project_id={extra[project_id]} | quote_id={extra[quote_id]} | {message}"
)

# Records logged without bind() still need these keys for the formats above.
logger.configure(extra={"quote_id": None, "project_id": None})


def get_context_info() -> Dict[str, Any]:
    """Haal context informatie op voor logging"""
    context = {}

    quote_id = quote_id_var.get()
    if quote_id:
        context["quote_id"] = quote_id

    project_id = project_id_var.get()
    if project_id:
        context["project_id"] = project_id

    return context


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configureer Loguru logging met context-aware formatting"""
    s = settings or get_settings()

    # Verwijder standaard handler
    logger.remove()

    logger.add(
        sys.stderr,
        format=_CONSOLE_FORMAT,
        level=s.log_level.upper(),
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if s.log_to_file:
        log_dir = Path(s.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / (s.log_file or "quoting.log"),
            format=_FILE_FORMAT,
            level="DEBUG",
            rotation=s.log_rotation,
            retention=s.log_retention,
            compression="zip",
        )


def get_logger(name: Optional[str] = None):
    """Krijg een logger met context informatie"""
    if name:
        return logger.bind(
            component=name,
            quote_id=quote_id_var.get(),
            project_id=project_id_var.get(),
        )
    return logger


def set_context(quote_id: Optional[str] = None, project_id: Optional[str] = None) -> None:
    if quote_id is not None:
        quote_id_var.set(quote_id)
    if project_id is not None:
        project_id_var.set(project_id)


def clear_context() -> None:
    quote_id_var.set(None)
    project_id_var.set(None)


class LoggingContext:
    """Context manager die quote/project IDs zet en bij exit herstelt."""

    def __init__(self, quote_id: Optional[str] = None, project_id: Optional[str] = None):
        self.quote_id = quote_id
        self.project_id = project_id
        self._tokens = []

    def __enter__(self):
        if self.quote_id is not None:
            self._tokens.append((quote_id_var, quote_id_var.set(self.quote_id)))
        if self.project_id is not None:
            self._tokens.append((project_id_var, project_id_var.set(self.project_id)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []
