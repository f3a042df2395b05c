"""
Rest compliance settings.

Values come from the REST_COMPLIANCE dict in Django settings, falling
back to the fleet's standing policy.
"""

from django.conf import settings

DEFAULTS = {
    "DRIVER_ACTIVITY_PERIOD_YEARS": 10,
    "EMPLOYEE_ACTIVITY_PERIOD_YEARS": 3,
    "STANDARD_REST_HOURS": 10,
    "DAY_OFF_REST_HOURS": 36,
    "WEEKLY_HOURS_LIMIT": 70,
    "GAP_TOLERANCE_DAYS": 1,
}


def get_setting(name):
    """Look up a rest compliance setting by name."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown rest compliance setting: {name}")
    overrides = getattr(settings, "REST_COMPLIANCE", {}) or {}
    return overrides.get(name, DEFAULTS[name])


def activity_period_for(entity_type):
    """Default activity lookback in years for a driver or employee."""
    if entity_type == "driver":
        return get_setting("DRIVER_ACTIVITY_PERIOD_YEARS")
    if entity_type == "employee":
        return get_setting("EMPLOYEE_ACTIVITY_PERIOD_YEARS")
    raise ValueError(f"Unknown entity type: {entity_type}")
