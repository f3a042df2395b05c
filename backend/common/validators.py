"""
Common validators and utilities for the fleet compliance application.

This module contains shared date parsing, validation and display
formatting used across the Django apps.
"""

from datetime import date, datetime, time, timezone as dt_timezone
from django.core.validators import BaseValidator
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from rest_compliance.exceptions import MalformedDateError

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE

# Weekday keys used by driver schedules, indexed by datetime.weekday()
WEEKDAY_KEYS = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


def to_aware_datetime(value, field="timestamp"):
    """
    Coerce a timestamp or calendar date into an aware UTC datetime.

    Accepts datetime, date or ISO 8601 strings. Calendar dates resolve to
    local midnight; naive datetimes are assumed to be local time.

    Raises MalformedDateError for anything that cannot be interpreted.
    """
    if isinstance(value, str):
        raw = value.strip()
        try:
            parsed = parse_datetime(raw) or parse_date(raw)
        except ValueError:
            parsed = None
        if parsed is None:
            raise MalformedDateError(field, value)
        value = parsed

    if isinstance(value, datetime):
        if timezone.is_naive(value):
            value = timezone.make_aware(value)
        return value.astimezone(dt_timezone.utc)

    if isinstance(value, date):
        midnight = timezone.make_aware(datetime.combine(value, time.min))
        return midnight.astimezone(dt_timezone.utc)

    raise MalformedDateError(field, value)


def is_blank(value):
    """Check whether an optional timestamp field is unset."""
    return value is None or (isinstance(value, str) and not value.strip())


def local_date_string(value):
    """Render an aware datetime as a local calendar date (YYYY-MM-DD)."""
    return timezone.localtime(value).date().isoformat()


def weekday_key(value):
    """Return the schedule key (sun..sat) for the local weekday of value."""
    return WEEKDAY_KEYS[timezone.localtime(value).weekday()]


def elapsed_ms(start, end):
    """Signed whole milliseconds from start to end."""
    delta = end.astimezone(dt_timezone.utc) - start.astimezone(dt_timezone.utc)
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


class LookbackYearsValidator(BaseValidator):
    """
    Validator for activity lookback periods.

    Ensures the period is a whole number of years between 1 and max_years.
    """

    def __init__(self, max_years=50):
        self.limit_value = max_years
        self.message = f"Lookback period must be between 1 and {max_years} years."

    def compare(self, value, limit_value):
        try:
            years = int(value)
        except (ValueError, TypeError):
            return True
        return years != value or not (1 <= years <= limit_value)

    def clean(self, value):
        return value


def validate_lookback_years(value):
    """Validate an activity lookback period in years."""
    validator = LookbackYearsValidator()
    validator(value)


def format_duration(ms):
    """
    Format a duration in milliseconds for dispatch timers.

    Durations under an hour render as minutes ("45 min"), longer ones as
    hours and zero-padded minutes ("9h 05min"). Negative durations are
    clamped to zero.
    """
    total_minutes = max(0, int(ms)) // MS_PER_MINUTE

    if total_minutes < 60:
        return f"{total_minutes} min"

    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes:02d}min"


def format_hours(decimal_hours):
    """Format decimal hours as "Xh YYmin", or "-" when nothing was worked."""
    if not decimal_hours:
        return "-"

    hours = int(decimal_hours)
    minutes = round((decimal_hours - hours) * 60)
    if minutes == 60:
        hours, minutes = hours + 1, 0

    if hours + minutes == 0:
        return "-"

    return f"{hours}h {minutes:02d}min"
