from datetime import datetime, timezone as dt_timezone

from rest_compliance.serializers import (
    ActivityGapsRequestSerializer,
    AvailabilitySheetRequestSerializer,
    RestTimerRequestSerializer,
    build_schedule,
    build_shift,
)


class TestRestTimerRequestSerializer:
    def test_valid_payload(self):
        serializer = RestTimerRequestSerializer(
            data={
                "last_shift": {
                    "check_in_time": "2024-06-04T08:00:00Z",
                    "check_out_time": "2024-06-04T18:00:00Z",
                },
                "schedule": {"wed": False},
                "now": "2024-06-05T12:00:00Z",
            }
        )

        assert serializer.is_valid(), serializer.errors
        shift = build_shift(serializer.validated_data["last_shift"])
        assert shift.check_out_time == datetime(2024, 6, 4, 18, 0, tzinfo=dt_timezone.utc)
        assert build_schedule(serializer.validated_data["schedule"]).is_day_off("wed")

    def test_empty_check_out_is_open_shift(self):
        serializer = RestTimerRequestSerializer(
            data={"last_shift": {"check_in_time": "2024-06-05T08:00:00Z", "check_out_time": ""}}
        )

        assert serializer.is_valid(), serializer.errors
        assert build_shift(serializer.validated_data["last_shift"]).is_open

    def test_blank_shift_and_schedule_mean_missing(self):
        serializer = RestTimerRequestSerializer(data={"last_shift": "", "schedule": ""})

        assert serializer.is_valid(), serializer.errors
        assert build_shift(serializer.validated_data["last_shift"]) is None
        assert build_schedule(serializer.validated_data["schedule"]) is None

    def test_malformed_timestamp(self):
        serializer = RestTimerRequestSerializer(
            data={"last_shift": {"check_in_time": "not-a-date"}}
        )

        assert not serializer.is_valid()
        assert "check_in_time" in serializer.errors["last_shift"]

    def test_unknown_schedule_day(self):
        serializer = RestTimerRequestSerializer(data={"schedule": {"funday": True}})

        assert not serializer.is_valid()
        assert "schedule" in serializer.errors

    def test_check_out_before_check_in(self):
        serializer = RestTimerRequestSerializer(
            data={
                "last_shift": {
                    "check_in_time": "2024-06-05T08:00:00Z",
                    "check_out_time": "2024-06-04T18:00:00Z",
                }
            }
        )

        assert not serializer.is_valid()
        assert "check_out_time" in serializer.errors["last_shift"]

    def test_build_shift_keeps_id(self):
        shift = build_shift(
            {"id": 7, "check_in_time": datetime(2024, 6, 5, 8, 0, tzinfo=dt_timezone.utc)}
        )

        assert shift.id == 7
        assert shift.is_open


class TestActivityGapsRequestSerializer:
    def test_driver_period_by_default(self):
        serializer = ActivityGapsRequestSerializer(data={"activity_history": []})

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["period"] == 10

    def test_employee_period(self):
        serializer = ActivityGapsRequestSerializer(
            data={"activity_history": [], "entity_type": "employee"}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["period"] == 3

    def test_explicit_period(self):
        serializer = ActivityGapsRequestSerializer(
            data={"activity_history": [], "entity_type": "employee", "period": 5}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["period"] == 5

    def test_period_must_be_positive(self):
        serializer = ActivityGapsRequestSerializer(data={"activity_history": [], "period": 0})

        assert not serializer.is_valid()
        assert "period" in serializer.errors

    def test_end_date_required_unless_till_now(self):
        serializer = ActivityGapsRequestSerializer(
            data={"activity_history": [{"start_date": "2024-01-01"}]}
        )

        assert not serializer.is_valid()
        assert "end_date" in serializer.errors["activity_history"][0]

    def test_end_date_before_start(self):
        serializer = ActivityGapsRequestSerializer(
            data={"activity_history": [{"start_date": "2024-01-01", "end_date": "2023-01-01"}]}
        )

        assert not serializer.is_valid()

    def test_intervals_built_from_history(self):
        serializer = ActivityGapsRequestSerializer(
            data={
                "activity_history": [
                    {"start_date": "2024-01-01", "end_date": "", "till_now": True},
                    {"start_date": "2023-01-01", "end_date": "2023-06-01", "delete": True},
                ]
            }
        )

        assert serializer.is_valid(), serializer.errors
        intervals = serializer.get_intervals()
        assert intervals[0].till_now and intervals[0].end_date is None
        assert intervals[1].delete


class TestAvailabilitySheetRequestSerializer:
    def test_drivers(self):
        serializer = AvailabilitySheetRequestSerializer(
            data={
                "drivers": [
                    {"id": 1, "last_shift": {"check_in_time": "2024-06-05T08:00:00Z"}},
                    {"id": 2, "last_shift": None, "schedule": {"sun": False}},
                ]
            }
        )

        assert serializer.is_valid(), serializer.errors
        drivers = serializer.get_drivers()
        assert drivers[0]["last_shift"].is_open
        assert drivers[0]["schedule"] is None
        assert drivers[1]["last_shift"] is None
        assert drivers[1]["schedule"].is_day_off("sun")
