"""
URL configuration for Rest Compliance API endpoints.

Provides URL routing for the stateless rest compliance calculations:
shift timers, activity continuity, weekly hours and availability.
"""

from django.urls import path
from .views import RestComplianceViewSet

urlpatterns = [
    path('rest-timer/',
         RestComplianceViewSet.as_view({'post': 'rest_timer'}),
         name='compliance-rest-timer'),
    path('activity-gaps/',
         RestComplianceViewSet.as_view({'post': 'activity_gaps'}),
         name='compliance-activity-gaps'),
    path('weekly-hours/',
         RestComplianceViewSet.as_view({'post': 'weekly_hours'}),
         name='compliance-weekly-hours'),
    path('availability/',
         RestComplianceViewSet.as_view({'post': 'availability'}),
         name='compliance-availability'),
    path('availability-sheet/',
         RestComplianceViewSet.as_view({'post': 'availability_sheet'}),
         name='compliance-availability-sheet'),
]

# API Documentation - Available Endpoints:
"""
POST Endpoints:
- /api/compliance/rest-timer/ - Shift timer: time on duty or until rest ends
- /api/compliance/activity-gaps/ - Gaps in activity history within the required period
- /api/compliance/weekly-hours/ - Hours worked since the last scheduled day off
- /api/compliance/availability/ - Whether a driver can start or end a shift
- /api/compliance/availability-sheet/ - Dispatch rows ordered by shift timer
"""
