"""Shared date helpers used across the clinic scheduler."""

from datetime import datetime, timedelta
from typing import Optional

from clinic_scheduler.config import settings


def add_hours(value: datetime, hours: int) -> datetime:
    """Shift a datetime by whole wall-clock hours."""
    return value + timedelta(hours=hours)


def add_minutes(value: datetime, minutes: int) -> datetime:
    """Shift a datetime by whole minutes."""
    return value + timedelta(minutes=minutes)


def format_display_datetime(value: Optional[datetime], fallback: str = "") -> str:
    """Render a datetime in the clinic's message format.

    Examples:
        >>> format_display_datetime(datetime(2024, 1, 2, 11, 0))
        '02/01/2024 alle 11:00'
        >>> format_display_datetime(None, "data non disponibile")
        'data non disponibile'
    """
    if value is None:
        return fallback
    return value.strftime(settings.display.datetime_format)


def format_input_datetime(value: datetime) -> str:
    """Render a datetime the way a ``datetime-local`` input expects it."""
    return value.strftime("%Y-%m-%dT%H:%M")


def parse_input_datetime(value: str) -> datetime:
    """Parse ``YYYY-MM-DDTHH:MM`` (or ``YYYY-MM-DD HH:MM``) input."""
    return datetime.fromisoformat(value.strip())
