"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import (
    ensure_utc,
    minutes_between,
    start_of_utc_day,
    utc_now,
)
from app.shared.utils.generators import generate_cuid, generate_session_id
from app.shared.utils.sanitization import escape_like, sanitize_text

__all__ = [
    "generate_cuid",
    "generate_session_id",
    "utc_now",
    "ensure_utc",
    "minutes_between",
    "start_of_utc_day",
    "escape_like",
    "sanitize_text",
]
