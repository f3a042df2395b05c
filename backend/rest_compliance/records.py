"""
In-memory compliance records.

Read-only snapshots of shift, schedule and activity data materialized
per request from the system of record. Timestamps are validated and
normalized to aware datetimes on construction, so calculations never see
an unparseable value.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Mapping, Optional

from common.validators import WEEKDAY_KEYS, is_blank, to_aware_datetime
from .exceptions import MalformedInputError


@dataclass(frozen=True)
class ShiftRecord:
    """
    A single duty period bounded by check-in and check-out.

    Attributes:
        check_in_time: When the driver started the shift
        check_out_time: When the shift ended, None while still on duty
        id: Shift identifier within the driver's attendance history
    """

    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    id: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(
            self, "check_in_time", to_aware_datetime(self.check_in_time, "check_in_time")
        )
        if is_blank(self.check_out_time):
            object.__setattr__(self, "check_out_time", None)
        else:
            object.__setattr__(
                self,
                "check_out_time",
                to_aware_datetime(self.check_out_time, "check_out_time"),
            )
            if self.check_out_time < self.check_in_time:
                raise MalformedInputError("check_out_time cannot be before check_in_time")

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> Optional["ShiftRecord"]:
        """Build a shift from an API payload; empty payloads mean no shift."""
        if not data:
            return None
        if "check_in_time" not in data or is_blank(data["check_in_time"]):
            raise MalformedInputError("Shift is missing check_in_time")
        return cls(
            check_in_time=data["check_in_time"],
            check_out_time=data.get("check_out_time"),
            id=data.get("id"),
        )


@dataclass(frozen=True)
class ActivityInterval:
    """
    A continuous period of recorded employment or engagement.

    Attributes:
        start_date: First day of the activity
        end_date: Last day of the activity, None when open-ended
        till_now: Whether the activity extends to the present
        delete: Whether the interval has been logically removed
    """

    start_date: datetime
    end_date: Optional[datetime] = None
    till_now: bool = False
    delete: bool = False

    def __post_init__(self):
        for flag in ("till_now", "delete"):
            if not isinstance(getattr(self, flag), bool):
                raise MalformedInputError(f"{flag} must be true or false")
        object.__setattr__(
            self, "start_date", to_aware_datetime(self.start_date, "start_date")
        )
        if is_blank(self.end_date):
            object.__setattr__(self, "end_date", None)
            if not self.till_now and not self.delete:
                raise MalformedInputError(
                    "Activity interval needs an end_date unless till_now is set"
                )
        else:
            object.__setattr__(
                self, "end_date", to_aware_datetime(self.end_date, "end_date")
            )

    def effective_end(self, now: datetime) -> datetime:
        """End of the interval, with open-ended activity running to now."""
        return now if self.till_now else self.end_date

    @classmethod
    def from_dict(cls, data: Mapping) -> "ActivityInterval":
        return cls(
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            till_now=data.get("till_now", False),
            delete=data.get("delete", False),
        )


class WeeklySchedule:
    """
    Weekly schedule keyed by weekday (sun..sat).

    A False value marks a scheduled day off; missing days are not treated
    as days off.
    """

    def __init__(self, days: Optional[Mapping[str, bool]] = None):
        days = dict(days or {})
        unknown = set(days) - set(WEEKDAY_KEYS)
        if unknown:
            raise MalformedInputError(
                f"Unknown schedule days: {', '.join(sorted(unknown))}"
            )
        not_flags = [day for day, works in days.items() if not isinstance(works, bool)]
        if not_flags:
            raise MalformedInputError(
                f"Schedule values must be true or false: {', '.join(sorted(not_flags))}"
            )
        self._days: Dict[str, bool] = days

    def is_day_off(self, day_key: str) -> bool:
        return self._days.get(day_key) is False

    def __repr__(self):
        return f"WeeklySchedule({self._days!r})"
