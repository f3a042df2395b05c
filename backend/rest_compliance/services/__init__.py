"""
Rest Compliance Services Package.

This package contains the business logic for driver and employee rest
compliance and activity continuity.

Services:
- RestTimerService: On-duty and mandatory rest timers
- ActivityGapDetectorService: Activity history gap detection
- WorkingHoursService: Weekly working hours within the working block
- DriverAvailabilityService: Dispatch start/end shift decisions
"""

from .rest_timer import RestTimerService, compute_rest_or_duty_offset_ms
from .activity_gap_detector import ActivityGapDetectorService, find_activity_gaps
from .working_hours import WorkingHoursService, calculate_working_hours_week
from .driver_availability import DriverAvailabilityService

__all__ = [
    'RestTimerService',
    'ActivityGapDetectorService',
    'WorkingHoursService',
    'DriverAvailabilityService',
    'compute_rest_or_duty_offset_ms',
    'find_activity_gaps',
    'calculate_working_hours_week',
]
