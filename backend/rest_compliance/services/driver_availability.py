"""
Driver Availability Service.

Decides whether dispatch may put a driver on a new shift, and builds
the availability sheet rows ordered by shift timer.

A driver who is off duty may start a shift only when:
- they have a weekly schedule
- today is not a scheduled day off
- their weekly hours are below the limit
- their mandatory rest has elapsed
- their file is compliant

A driver on duty can always be taken off shift.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional

from common.validators import format_hours, to_aware_datetime, weekday_key
from ..conf import get_setting
from ..exceptions import RestComplianceError
from ..records import ShiftRecord, WeeklySchedule
from .rest_timer import RestTimerService, compute_rest_or_duty_offset_ms
from .working_hours import calculate_working_hours_week

logger = logging.getLogger(__name__)


class DriverAvailabilityService:
    """
    Service for dispatch availability decisions.

    Combines the rest timer, weekly hours and schedule into the
    start/end shift decision shown on the availability sheet.
    """

    REASON_NO_SCHEDULE = "no_schedule"
    REASON_DAY_OFF = "scheduled_day_off"
    REASON_WEEKLY_HOURS = "weekly_hours_limit"
    REASON_RESTING = "resting"
    REASON_NOT_COMPLIANT = "not_compliant"

    def __init__(self):
        self.rest_timer = RestTimerService()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def evaluate(
        self,
        last_shift: Optional[ShiftRecord],
        weekly_schedule: Optional[WeeklySchedule],
        shifts: Iterable[ShiftRecord],
        compliant: bool,
        now: datetime,
    ) -> Dict:
        """
        Evaluate whether a driver can start or end a shift.

        Args:
            last_shift: Driver's most recent shift
            weekly_schedule: Driver's weekly schedule, None if unassigned
            shifts: Driver's attendance history
            compliant: Whether the driver's file passes safety compliance
            now: Current time

        Returns:
            Dict containing the decision, blocking reasons and timers
        """
        try:
            now = to_aware_datetime(now, "now")
            shift_timer = self.rest_timer.get_shift_timer(last_shift, weekly_schedule, now)
            on_duty = shift_timer["status"] == RestTimerService.STATUS_ON_DUTY

            weekly_hours = calculate_working_hours_week(
                shifts, last_shift, weekly_schedule, now
            )

            reasons = []
            if weekly_schedule is None:
                reasons.append(self.REASON_NO_SCHEDULE)
            elif weekly_schedule.is_day_off(weekday_key(now)):
                reasons.append(self.REASON_DAY_OFF)

            if weekly_hours >= get_setting("WEEKLY_HOURS_LIMIT"):
                reasons.append(self.REASON_WEEKLY_HOURS)

            if shift_timer["status"] == RestTimerService.STATUS_RESTING:
                reasons.append(self.REASON_RESTING)

            if not compliant:
                reasons.append(self.REASON_NOT_COMPLIANT)

            result = {
                "on_duty": on_duty,
                "can_start_shift": not on_duty and not reasons,
                "can_end_shift": on_duty,
                "reasons": reasons,
                "shift_timer": shift_timer,
                "weekly_hours": round(weekly_hours, 2),
                "weekly_hours_display": format_hours(weekly_hours),
            }

            self.logger.debug(
                f"Availability evaluated: on_duty={on_duty}, reasons={reasons}"
            )
            return result

        except RestComplianceError:
            raise
        except Exception as e:
            self.logger.error(f"Availability evaluation failed: {str(e)}")
            raise RestComplianceError(f"Failed to evaluate availability: {str(e)}")

    def build_availability_sheet(
        self, drivers: Iterable[Mapping], now: datetime
    ) -> List[Dict]:
        """
        Attach shift timers to dispatch rows and order them by timer.

        Each driver mapping carries "id", "last_shift" (ShiftRecord or None)
        and "schedule" (WeeklySchedule or None). Rows with equal timers keep
        their input order.
        """
        try:
            now = to_aware_datetime(now, "now")
            rows = []
            for driver in drivers:
                last_shift = driver.get("last_shift")
                schedule = driver.get("schedule")
                offset_ms = compute_rest_or_duty_offset_ms(last_shift, schedule, now)
                rows.append(
                    {
                        "id": driver.get("id"),
                        "in_work": last_shift is not None and last_shift.is_open,
                        "shift_timer_ms": offset_ms,
                    }
                )

            rows.sort(key=lambda row: row["shift_timer_ms"])

            self.logger.debug(f"Availability sheet built for {len(rows)} drivers")
            return rows

        except RestComplianceError:
            raise
        except Exception as e:
            self.logger.error(f"Availability sheet build failed: {str(e)}")
            raise RestComplianceError(f"Failed to build availability sheet: {str(e)}")
