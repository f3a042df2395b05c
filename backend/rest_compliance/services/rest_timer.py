"""
Rest Timer Service.

Computes the dispatch shift timer for a driver: how long they have been
on duty, or how long until their mandatory rest period ends.

Rest requirements:
- 10 hours off duty after a shift on a working day
- 36 hours off duty when today is a scheduled day off

The required rest is chosen from today's schedule, not the schedule of
the day the rest period began.

Single Responsibility: rest/duty timer calculation only.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from common.validators import elapsed_ms, format_duration, to_aware_datetime, weekday_key
from ..conf import get_setting
from ..exceptions import RestComplianceError
from ..records import ShiftRecord, WeeklySchedule

logger = logging.getLogger(__name__)


def required_rest_hours(weekly_schedule: Optional[WeeklySchedule], now: datetime) -> int:
    """Hours of rest required before a new shift, based on today's schedule."""
    if weekly_schedule is not None and weekly_schedule.is_day_off(weekday_key(now)):
        return get_setting("DAY_OFF_REST_HOURS")
    return get_setting("STANDARD_REST_HOURS")


def compute_rest_or_duty_offset_ms(
    last_shift: Optional[ShiftRecord],
    weekly_schedule: Optional[WeeklySchedule],
    now: datetime,
) -> int:
    """
    Signed shift timer in milliseconds.

    Returns 0 without a previous shift. While the shift is open, returns
    the time on duty (non-negative). Once closed, returns the time until
    the driver may start a new shift: positive while still resting,
    zero or negative once rest has elapsed.
    """
    if last_shift is None:
        return 0

    now = to_aware_datetime(now, "now")

    if last_shift.is_open:
        return elapsed_ms(last_shift.check_in_time, now)

    rest_hours = required_rest_hours(weekly_schedule, now)
    available_at = last_shift.check_out_time + timedelta(hours=rest_hours)
    return elapsed_ms(now, available_at)


class RestTimerService:
    """
    Service for reporting a driver's on-duty or resting state.

    Wraps the shift timer calculation with status classification and
    display formatting for dispatch.
    """

    STATUS_NO_SHIFT = "no_shift"
    STATUS_ON_DUTY = "on_duty"
    STATUS_RESTING = "resting"
    STATUS_AVAILABLE = "available"

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def get_shift_timer(
        self,
        last_shift: Optional[ShiftRecord],
        weekly_schedule: Optional[WeeklySchedule],
        now: datetime,
    ) -> Dict:
        """
        Calculate the shift timer and duty state for a driver.

        Args:
            last_shift: Most recent shift, None if the driver never worked
            weekly_schedule: Driver's weekly schedule, if any
            now: Current time, sampled once by the caller

        Returns:
            Dict containing status, signed offset and display values
        """
        try:
            now = to_aware_datetime(now, "now")
            offset_ms = compute_rest_or_duty_offset_ms(last_shift, weekly_schedule, now)

            rest_hours = None
            available_at = None
            timer_display = ""

            if last_shift is None:
                status = self.STATUS_NO_SHIFT
            elif last_shift.is_open:
                status = self.STATUS_ON_DUTY
                timer_display = format_duration(offset_ms)
            else:
                rest_hours = required_rest_hours(weekly_schedule, now)
                available_at = last_shift.check_out_time + timedelta(hours=rest_hours)
                if offset_ms > 0:
                    status = self.STATUS_RESTING
                    timer_display = format_duration(offset_ms)
                else:
                    status = self.STATUS_AVAILABLE

            self.logger.debug(f"Shift timer calculated: status={status}, offset_ms={offset_ms}")

            return {
                "status": status,
                "offset_ms": offset_ms,
                "required_rest_hours": rest_hours,
                "available_at": available_at.isoformat() if available_at else None,
                "timer_display": timer_display,
                "calculated_at": now.isoformat(),
            }

        except RestComplianceError:
            raise
        except Exception as e:
            self.logger.error(f"Shift timer calculation failed: {str(e)}")
            raise RestComplianceError(f"Failed to calculate shift timer: {str(e)}")
