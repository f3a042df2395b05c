"""
Rest Compliance API Views.

Provides REST API endpoints for rest/duty timers, activity continuity
checks, weekly working hours and dispatch availability. All endpoints
are stateless calculations over the data supplied in the request.
"""

import logging
from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from .exceptions import MalformedInputError, RestComplianceError
from .serializers import (
    RestTimerRequestSerializer,
    ActivityGapsRequestSerializer,
    WeeklyHoursRequestSerializer,
    AvailabilityRequestSerializer,
    AvailabilitySheetRequestSerializer,
    build_shift,
    build_schedule,
)
from .services.rest_timer import RestTimerService
from .services.activity_gap_detector import ActivityGapDetectorService
from .services.working_hours import WorkingHoursService
from .services.driver_availability import DriverAvailabilityService

logger = logging.getLogger(__name__)


def error_response(error):
    """Map a service-layer error onto an HTTP response."""
    if isinstance(error, MalformedInputError):
        return Response(
            {'error': 'Malformed input', 'details': str(error)},
            status=status.HTTP_400_BAD_REQUEST
        )
    return Response(
        {'error': 'Rest compliance calculation failed', 'details': str(error)},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


class RestComplianceViewSet(viewsets.ViewSet):
    """
    ViewSet for rest compliance calculations.

    Provides endpoints for calculating driver rest and activity
    compliance without persisting data to the database.
    """

    permission_classes = [AllowAny]

    def _now(self, serializer):
        """Current time for the request, sampled once."""
        return serializer.validated_data.get('now') or timezone.now()

    def rest_timer(self, request):
        """
        Calculate the shift timer for a driver.

        Request Body:
            last_shift (object): check_in_time, check_out_time
            schedule (object): sun..sat -> bool, false marks a day off
            now (datetime): Optional clock override
        """
        serializer = RestTimerRequestSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(
                serializer.errors,
                status=status.HTTP_400_BAD_REQUEST
            )

        now = self._now(serializer)
        data = serializer.validated_data

        try:
            result = RestTimerService().get_shift_timer(
                last_shift=build_shift(data.get('last_shift')),
                weekly_schedule=build_schedule(data.get('schedule')),
                now=now,
            )

            logger.info(f"Shift timer calculated: {result['status']}")
            return Response(result)

        except RestComplianceError as e:
            logger.error(f"Shift timer calculation failed: {str(e)}")
            return error_response(e)

    def activity_gaps(self, request):
        """
        Check an activity history for gaps within the required period.

        Request Body:
            activity_history (list): start_date, end_date, till_now, delete
            entity_type (str): driver or employee, selects the default period
            period (int): Optional period override in years
            now (datetime): Optional clock override
        """
        serializer = ActivityGapsRequestSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(
                serializer.errors,
                status=status.HTTP_400_BAD_REQUEST
            )

        now = self._now(serializer)

        try:
            result = ActivityGapDetectorService().check_activity_period(
                intervals=serializer.get_intervals(),
                period=serializer.validated_data['period'],
                now=now,
            )

            logger.info(f"Activity period checked: {len(result['gaps'])} gaps found")
            return Response(result)

        except RestComplianceError as e:
            logger.error(f"Activity period check failed: {str(e)}")
            return error_response(e)

    def weekly_hours(self, request):
        """
        Calculate hours worked in the current working block.

        Request Body:
            shifts (list): Driver's shifts
            last_shift (object): Driver's most recent shift
            schedule (object): Weekly schedule
            now (datetime): Optional clock override
        """
        serializer = WeeklyHoursRequestSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(
                serializer.errors,
                status=status.HTTP_400_BAD_REQUEST
            )

        now = self._now(serializer)
        data = serializer.validated_data

        try:
            result = WorkingHoursService().get_weekly_hours(
                shifts=[build_shift(shift) for shift in data.get('shifts', [])],
                last_shift=build_shift(data.get('last_shift')),
                weekly_schedule=build_schedule(data.get('schedule')),
                now=now,
            )

            logger.info(f"Weekly hours calculated: {result['working_hours']}")
            return Response(result)

        except RestComplianceError as e:
            logger.error(f"Weekly hours calculation failed: {str(e)}")
            return error_response(e)

    def availability(self, request):
        """
        Decide whether a driver can start or end a shift.

        Request Body: Same as weekly-hours, plus
            compliant (bool): Whether the driver's safety file is compliant
        """
        serializer = AvailabilityRequestSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(
                serializer.errors,
                status=status.HTTP_400_BAD_REQUEST
            )

        now = self._now(serializer)
        data = serializer.validated_data

        try:
            result = DriverAvailabilityService().evaluate(
                last_shift=build_shift(data.get('last_shift')),
                weekly_schedule=build_schedule(data.get('schedule')),
                shifts=[build_shift(shift) for shift in data.get('shifts', [])],
                compliant=data['compliant'],
                now=now,
            )

            logger.info(f"Availability evaluated: can_start_shift={result['can_start_shift']}")
            return Response(result)

        except RestComplianceError as e:
            logger.error(f"Availability evaluation failed: {str(e)}")
            return error_response(e)

    def availability_sheet(self, request):
        """
        Order dispatch rows by shift timer.

        Request Body:
            drivers (list): id, last_shift, schedule
            now (datetime): Optional clock override
        """
        serializer = AvailabilitySheetRequestSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(
                serializer.errors,
                status=status.HTTP_400_BAD_REQUEST
            )

        now = self._now(serializer)

        try:
            rows = DriverAvailabilityService().build_availability_sheet(
                serializer.get_drivers(), now
            )

            logger.info(f"Availability sheet built for {len(rows)} drivers")
            return Response({'drivers': rows, 'calculated_at': now.isoformat()})

        except RestComplianceError as e:
            logger.error(f"Availability sheet build failed: {str(e)}")
            return error_response(e)
