"""Loguru configuration for the app and the audit trail."""

import logging
import sys

from loguru import logger


class InterceptHandler(logging.Handler):
    """Forward stdlib records (werkzeug, gunicorn) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _not_audit(record) -> bool:
    return not record["extra"].get("audit")


def _audit_only(record) -> bool:
    return bool(record["extra"].get("audit"))


def setup_logging(level: str = "INFO", audit_path: str | None = None) -> None:
    """Route app logs to stdout and, when configured, audit lines to a file.

    The audit file is append-only and human-readable; nothing reads it back.
    """

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    if not any(isinstance(h, InterceptHandler) for h in root.handlers):
        root.addHandler(InterceptHandler())
    for name in ("werkzeug", "gunicorn.error", "gunicorn.access"):
        logging.getLogger(name).handlers = [InterceptHandler()]
        logging.getLogger(name).propagate = False
    logger.remove()
    logger.add(
        sys.stdout,
        level=level,
        filter=_not_audit,
        backtrace=False,
        diagnose=False,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function} - {message}",
    )
    logger.add(sys.stdout, level="INFO", filter=_audit_only, format="{time:YYYY-MM-DD HH:mm:ss.SSS} | AUDIT    | {message}")
    if audit_path:
        logger.add(
            audit_path,
            level="INFO",
            filter=_audit_only,
            format="[{time:YYYY-MM-DD[T]HH:mm:ss.SSSZ}] {message}",
            enqueue=True,
        )
