"""Date parsing boundary and calendar helpers.

Every raw date value entering the package goes through :func:`parse_date`,
which returns a plain calendar ``date``. Aware datetimes are converted to UTC
before the date is taken, so all later comparisons happen at UTC midnight.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from fiscal_dashboard.log import get_logger

logger = get_logger(__name__)

_MONTH_ABBREVIATIONS = ("jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez")

INVALID_DATE_LABEL = "Data Inválida"


def _from_datetime(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def _parse_string(raw: str) -> date:
    text = raw.strip()
    if len(text) == 10 and text[2] == "/" and text[5] == "/":
        return datetime.strptime(text, "%d/%m/%Y").date()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    if len(text) == 10:
        return date.fromisoformat(text)
    return _from_datetime(datetime.fromisoformat(text))


def parse_date(value: Any) -> Optional[date]:
    """Normalize a raw date value to a calendar date, or None when absent or malformed."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return _from_datetime(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return _parse_string(value)
        except ValueError:
            logger.warning("Ignoring malformed date %r", value)
            return None

    logger.warning("Ignoring unsupported date value of type %s", type(value).__name__)
    return None


def evaluation_date(now: date | datetime) -> date:
    """Calendar date of the evaluation instant, in the instant's own timezone."""

    if isinstance(now, datetime):
        return now.date()
    return now


def month_key(value: date) -> tuple[int, int]:
    return value.year, value.month


def month_label(value: date) -> str:
    """Short month label, e.g. ``jul/25``."""

    return f"{_MONTH_ABBREVIATIONS[value.month - 1]}/{value.year % 100:02d}"


def days_between(start: date, end: date) -> int:
    """Whole days from start to end; negative when end is before start."""

    return (end - start).days


def format_date(value: Optional[date]) -> str:
    """Display label ``dd/mmm/yyyy``, e.g. ``19/ago/2025``."""

    if value is None:
        return INVALID_DATE_LABEL
    return f"{value.day:02d}/{_MONTH_ABBREVIATIONS[value.month - 1]}/{value.year}"
