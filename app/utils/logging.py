import inspect
import logging
import sys

from loguru import logger

from app.core.config import settings

STDLIB_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi", "sqlalchemy")


class InterceptHandler(logging.Handler):
    """Forwards stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside the logging module so loguru reports the right location
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(log_file: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if settings.is_dev else settings.log_level)
    logger.add(log_file, rotation="1 day", retention="7 days", level="DEBUG", encoding="utf-8")

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in STDLIB_LOGGERS:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [InterceptHandler()]
        stdlib_logger.propagate = False
    # Statement logging in dev only
    logging.getLogger("sqlalchemy").setLevel(logging.INFO if settings.is_dev else logging.WARNING)
