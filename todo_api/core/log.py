import logging
from typing import Optional

from todo_api.core.config import settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """
    Configure the root logger for the application.

    Safe to call more than once; handlers are only installed the first time.
    """
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


def log_error(err: BaseException, message: Optional[str] = None) -> None:
    """
    Log an exception with its stack trace.

    Args:
        err: The exception that was caught.
        message: Optional context for the log line.
    """
    msg = f"ERROR: {message or err.__class__.__name__}: {err}"
    logger.error(msg, exc_info=(type(err), err, err.__traceback__))
