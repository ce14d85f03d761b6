"""Logging for the `vidpipe` logger tree.

Records emitted while an encode job is active carry that job's id as
`%(job_id)s` ("-" outside any job), so interleaved concurrent requests can be
told apart in one log file.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator

from vidpipe.config import LoggingSettings, Settings

_ROOT_LOGGER = "vidpipe"

_job_id: ContextVar[str | None] = ContextVar("vidpipe_job_id", default=None)


def current_job_id() -> str | None:
    return _job_id.get()


@contextmanager
def job_context(job_id: str) -> Iterator[None]:
    token = _job_id.set(job_id)
    try:
        yield
    finally:
        _job_id.reset(token)


class JobIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.job_id = _job_id.get() or "-"
        return True


def _file_handler(cfg: LoggingSettings, log_dir: str) -> RotatingFileHandler:
    file_path = Path(str(cfg.file))
    if not file_path.is_absolute():
        file_path = Path(log_dir) / file_path
    file_path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        file_path,
        maxBytes=int(cfg.max_bytes),
        backupCount=int(cfg.backup_count),
        encoding="utf-8",
    )


def setup_logging(settings: Settings) -> logging.Logger:
    """Attach console/file handlers to the `vidpipe` logger once per process.

    Framework loggers (uvicorn, fastapi) are left alone.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    if getattr(logger, "_vidpipe_configured", False):
        return logger

    cfg = settings.logging
    level = logging.getLevelName(str(cfg.level or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    formatter = logging.Formatter(fmt=str(cfg.format), datefmt=str(cfg.datefmt))
    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(logging.StreamHandler())
    if cfg.file:
        handlers.append(_file_handler(cfg, settings.log_dir))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(JobIdFilter())

    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = False
    setattr(logger, "_vidpipe_configured", True)
    return logger
