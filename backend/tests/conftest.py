from datetime import datetime, timezone as dt_timezone

import pytest
from rest_framework.test import APIClient

from rest_compliance.records import ShiftRecord, WeeklySchedule

WORKING_WEEK = {
    "sun": True,
    "mon": True,
    "tue": True,
    "wed": True,
    "thu": True,
    "fri": True,
    "sat": True,
}


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


@pytest.fixture
def now():
    # Wednesday
    return utc(2024, 6, 5, 12, 0)


@pytest.fixture
def working_week():
    return WeeklySchedule(WORKING_WEEK)


@pytest.fixture
def wednesday_off():
    return WeeklySchedule({**WORKING_WEEK, "wed": False})


@pytest.fixture
def make_shift():
    def _make(check_in, check_out=None, id=None):
        return ShiftRecord(check_in_time=check_in, check_out_time=check_out, id=id)

    return _make


@pytest.fixture
def api_client():
    return APIClient()
