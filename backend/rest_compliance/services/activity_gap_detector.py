"""
Activity Gap Detector Service.

Checks that a driver's or employee's activity history continuously
covers a lookback window ending now, and reports the uncovered spans.

Rules:
- The window spans lookback_years * 365 days back from now. Leap days
  are not accounted for.
- Deleted intervals are ignored.
- Gaps of up to one day between engagements are tolerated.
- Open-ended (till_now) activity runs to now.

Single Responsibility: activity continuity checking only.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from common.validators import local_date_string, to_aware_datetime
from ..conf import get_setting
from ..exceptions import RestComplianceError
from ..records import ActivityInterval

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365


def activity_window_start(now: datetime, lookback_years: int) -> datetime:
    """Start of the lookback window using fixed 365-day years."""
    return now - timedelta(days=lookback_years * DAYS_PER_YEAR)


def find_activity_gaps(
    intervals: Iterable[ActivityInterval], lookback_years: int, now: datetime
) -> List[Dict[str, str]]:
    """
    Find spans of the lookback window not covered by any activity.

    Args:
        intervals: Activity history in any order, possibly overlapping
        lookback_years: Length of the window in years
        now: Current time, sampled once by the caller

    Returns:
        Ordered list of {"start": "YYYY-MM-DD", "end": "YYYY-MM-DD"} gaps
    """
    now = to_aware_datetime(now, "now")
    window_start = activity_window_start(now, lookback_years)
    tolerance = timedelta(days=get_setting("GAP_TOLERANCE_DAYS"))

    recent_activity = sorted(
        (
            interval
            for interval in intervals
            if not interval.delete
            and (
                interval.start_date >= window_start
                or interval.effective_end(now) > window_start
            )
        ),
        key=lambda interval: interval.start_date,
    )

    gaps = []
    last_end = window_start

    for interval in recent_activity:
        if interval.start_date > last_end + tolerance:
            gaps.append(
                {
                    "start": local_date_string(last_end),
                    "end": local_date_string(interval.start_date),
                }
            )
        last_end = max(last_end, interval.effective_end(now))

    if last_end < now:
        gaps.append({"start": local_date_string(last_end), "end": local_date_string(now)})

    return gaps


class ActivityGapDetectorService:
    """
    Service for validating activity history continuity.

    Used by onboarding checklists: a driver or employee whose history has
    gaps inside the required period is not ready to be activated.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def check_activity_period(
        self, intervals: List[ActivityInterval], period: int, now: datetime
    ) -> Dict:
        """
        Check an activity history against the required period.

        Args:
            intervals: Activity history records
            period: Required continuous period in years
            now: Current time

        Returns:
            Dict containing detected gaps and whether the period is fulfilled
        """
        try:
            now = to_aware_datetime(now, "now")
            gaps = find_activity_gaps(intervals, period, now)

            self.logger.debug(
                f"Activity period check completed: {len(gaps)} gaps in {period} years"
            )

            return {
                "gaps": gaps,
                "has_gaps": bool(gaps),
                "is_fulfilled": not gaps,
                "period_years": period,
                "window_start": local_date_string(activity_window_start(now, period)),
                "checked_at": now.isoformat(),
            }

        except RestComplianceError:
            raise
        except Exception as e:
            self.logger.error(f"Activity period check failed: {str(e)}")
            raise RestComplianceError(f"Failed to check activity period: {str(e)}")
