"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings
from app.core.tenant_context import get_tenant_id
from app.shared.context import get_current_actor_id

_LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [tenant=%(tenant_id)s user=%(user_id)s] %(message)s"
)


class TenantContextFilter(logging.Filter):
    """Attach the current tenant and user ids (or '-') to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.tenant_id = get_tenant_id() or "-"
        record.user_id = get_current_actor_id() or "-"
        return True


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout; each record carries the request's tenant and user ids.
    SQLAlchemy engine logging follows DATABASE_ECHO.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(TenantContextFilter())
    logging.basicConfig(
        level=log_level,
        format=_LOG_FORMAT,
        handlers=[handler],
    )
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
