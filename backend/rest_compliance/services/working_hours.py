"""
Weekly Working Hours Service.

Sums the hours a driver has worked in the current working block, the
days since their last scheduled day off, and checks them against the
weekly hours limit.

Only closed shifts count toward the total.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Dict, Iterable, Optional

from django.utils import timezone

from common.validators import MS_PER_HOUR, WEEKDAY_KEYS, elapsed_ms, format_hours, to_aware_datetime
from ..conf import get_setting
from ..exceptions import RestComplianceError
from ..records import ShiftRecord, WeeklySchedule

logger = logging.getLogger(__name__)

BLOCK_LOOKBACK_DAYS = 7


def working_block_start(weekly_schedule: Optional[WeeklySchedule], now: datetime) -> datetime:
    """
    Local midnight starting the current working block.

    Walks back from yesterday over the last week; the block starts the day
    after the most recent scheduled day off. Without one, the block covers
    the last seven days.
    """
    local_now = timezone.localtime(now)
    start_day = None

    if weekly_schedule is not None:
        cursor = local_now.date() - timedelta(days=1)
        for _ in range(BLOCK_LOOKBACK_DAYS):
            if weekly_schedule.is_day_off(WEEKDAY_KEYS[cursor.weekday()]):
                start_day = cursor + timedelta(days=1)
                break
            cursor -= timedelta(days=1)

    if start_day is None:
        start_day = (local_now - timedelta(days=BLOCK_LOOKBACK_DAYS)).date()

    return timezone.make_aware(datetime.combine(start_day, time.min))


def calculate_working_hours_week(
    shifts: Iterable[ShiftRecord],
    last_shift: Optional[ShiftRecord],
    weekly_schedule: Optional[WeeklySchedule],
    now: datetime,
) -> float:
    """Hours worked in closed shifts since the start of the working block."""
    now = to_aware_datetime(now, "now")
    block_start = working_block_start(weekly_schedule, now)

    excluded_id = None
    if last_shift is not None and last_shift.is_open:
        excluded_id = last_shift.id

    total_ms = 0
    for shift in shifts:
        if excluded_id is not None and shift.id == excluded_id:
            continue
        if shift.is_open:
            continue
        if shift.check_in_time >= block_start and shift.check_out_time <= now:
            total_ms += elapsed_ms(shift.check_in_time, shift.check_out_time)

    return total_ms / MS_PER_HOUR


class WorkingHoursService:
    """
    Service for weekly working hours reporting.

    Reports the hours worked in the current block alongside the weekly
    limit used by dispatch to block further shifts.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def get_weekly_hours(
        self,
        shifts: Iterable[ShiftRecord],
        last_shift: Optional[ShiftRecord],
        weekly_schedule: Optional[WeeklySchedule],
        now: datetime,
    ) -> Dict:
        try:
            now = to_aware_datetime(now, "now")
            hours = calculate_working_hours_week(shifts, last_shift, weekly_schedule, now)
            limit = get_setting("WEEKLY_HOURS_LIMIT")

            return {
                "working_hours": round(hours, 2),
                "display": format_hours(hours),
                "limit": limit,
                "exceeds_limit": hours >= limit,
                "block_start": working_block_start(weekly_schedule, now).isoformat(),
                "calculated_at": now.isoformat(),
            }

        except RestComplianceError:
            raise
        except Exception as e:
            self.logger.error(f"Weekly hours calculation failed: {str(e)}")
            raise RestComplianceError(f"Failed to calculate weekly hours: {str(e)}")
