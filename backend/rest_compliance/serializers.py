"""
Rest Compliance API Serializers.

Provides request validation for the rest compliance endpoints. These
serializers are the input boundary: anything that reaches the service
layer has already been parsed into aware datetimes and validated
schedules.
"""

from rest_framework import serializers

from common.validators import WEEKDAY_KEYS, to_aware_datetime, validate_lookback_years
from .conf import activity_period_for
from .exceptions import MalformedDateError
from .records import ActivityInterval, ShiftRecord, WeeklySchedule


class BlankAsNullMixin:
    """Treat empty strings from the dispatch UI as missing values."""

    def validate_empty_values(self, data):
        if isinstance(data, str) and not data.strip():
            data = None
        return super().validate_empty_values(data)


class ComplianceTimestampField(BlankAsNullMixin, serializers.Field):
    """
    Timestamp or calendar date field.

    Accepts ISO 8601 timestamps and YYYY-MM-DD dates; calendar dates
    resolve to local midnight. Values are returned as aware datetimes.
    """

    default_error_messages = {
        "invalid": "Enter a valid date (YYYY-MM-DD) or ISO 8601 timestamp.",
    }

    def to_internal_value(self, data):
        try:
            return to_aware_datetime(data, self.field_name)
        except MalformedDateError:
            self.fail("invalid")

    def to_representation(self, value):
        return value.isoformat()


def validate_schedule_days(value):
    """Reject schedule keys that are not weekday keys."""
    unknown = set(value) - set(WEEKDAY_KEYS)
    if unknown:
        raise serializers.ValidationError(
            f"Unknown schedule days: {', '.join(sorted(unknown))}"
        )


class WeeklyScheduleField(BlankAsNullMixin, serializers.DictField):
    """Weekly schedule mapping sun..sat to whether the driver works that day."""

    def __init__(self, **kwargs):
        kwargs.setdefault("child", serializers.BooleanField())
        kwargs.setdefault("validators", [validate_schedule_days])
        super().__init__(**kwargs)


class ShiftSerializer(BlankAsNullMixin, serializers.Serializer):
    """
    Serializer for a single shift.

    An empty or missing check_out_time means the shift is still open.
    """

    id = serializers.IntegerField(required=False, allow_null=True)
    check_in_time = ComplianceTimestampField()
    check_out_time = ComplianceTimestampField(required=False, allow_null=True)

    def validate(self, data):
        check_out_time = data.get("check_out_time")
        if check_out_time and check_out_time < data["check_in_time"]:
            raise serializers.ValidationError(
                {"check_out_time": "check_out_time cannot be before check_in_time"}
            )
        return data


class ActivityIntervalSerializer(serializers.Serializer):
    """Serializer for an activity history entry."""

    start_date = ComplianceTimestampField()
    end_date = ComplianceTimestampField(required=False, allow_null=True)
    till_now = serializers.BooleanField(default=False)
    delete = serializers.BooleanField(default=False)

    def validate(self, data):
        """An entry must end somewhere unless it is open-ended or deleted."""
        if not data.get("end_date") and not data["till_now"] and not data["delete"]:
            raise serializers.ValidationError(
                {"end_date": "end_date is required unless till_now is set"}
            )

        end_date = data.get("end_date")
        if end_date and not data["till_now"] and end_date < data["start_date"]:
            raise serializers.ValidationError(
                {"end_date": "end_date cannot be before start_date"}
            )

        return data


class ClockedRequestSerializer(serializers.Serializer):
    """Base for requests that may pin the current time."""

    now = ComplianceTimestampField(
        required=False,
        allow_null=True,
        help_text="Override for the current time (defaults to server time)",
    )


def build_shift(data):
    """Convert validated shift data into a ShiftRecord."""
    return ShiftRecord.from_dict(data)


def build_schedule(data):
    """Convert a validated schedule mapping into a WeeklySchedule."""
    if data is None:
        return None
    return WeeklySchedule(data)


class RestTimerRequestSerializer(ClockedRequestSerializer):
    """Serializer for rest/duty timer requests."""

    last_shift = ShiftSerializer(required=False, allow_null=True)
    schedule = WeeklyScheduleField(required=False, allow_null=True)


class ActivityGapsRequestSerializer(ClockedRequestSerializer):
    """
    Serializer for activity continuity checks.

    The lookback period defaults to the policy for the entity type
    (drivers 10 years, employees 3) unless given explicitly.
    """

    ENTITY_TYPES = ["driver", "employee"]

    activity_history = ActivityIntervalSerializer(many=True)
    entity_type = serializers.ChoiceField(choices=ENTITY_TYPES, default="driver")
    period = serializers.IntegerField(
        required=False,
        allow_null=True,
        validators=[validate_lookback_years],
        help_text="Required continuous period in years",
    )

    def validate(self, data):
        if data.get("period") is None:
            data["period"] = activity_period_for(data["entity_type"])
        return data

    def get_intervals(self):
        return [
            ActivityInterval.from_dict(entry)
            for entry in self.validated_data["activity_history"]
        ]


class WeeklyHoursRequestSerializer(ClockedRequestSerializer):
    """Serializer for weekly working hours requests."""

    shifts = ShiftSerializer(many=True, required=False)
    last_shift = ShiftSerializer(required=False, allow_null=True)
    schedule = WeeklyScheduleField(required=False, allow_null=True)


class AvailabilityRequestSerializer(WeeklyHoursRequestSerializer):
    """Serializer for dispatch availability requests."""

    compliant = serializers.BooleanField(
        default=True,
        help_text="Whether the driver's safety file is compliant",
    )


class DriverRowSerializer(serializers.Serializer):
    """Serializer for a row of the dispatch availability sheet."""

    id = serializers.IntegerField()
    last_shift = ShiftSerializer(required=False, allow_null=True)
    schedule = WeeklyScheduleField(required=False, allow_null=True)


class AvailabilitySheetRequestSerializer(ClockedRequestSerializer):
    """Serializer for availability sheet requests."""

    drivers = DriverRowSerializer(many=True)

    def get_drivers(self):
        return [
            {
                "id": row["id"],
                "last_shift": build_shift(row.get("last_shift")),
                "schedule": build_schedule(row.get("schedule")),
            }
            for row in self.validated_data["drivers"]
        ]
