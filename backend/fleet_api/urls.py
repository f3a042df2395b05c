"""
URL configuration for fleet_api project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/4.2/topics/http/urls/
"""

from django.urls import path, include
from django.http import JsonResponse

def api_root(request):
    """API root endpoint with available endpoints."""
    return JsonResponse({
        'message': 'Fleet Compliance API',
        'version': '1.0',
        'endpoints': {
            'rest_compliance': '/api/compliance/',
        },
        'documentation': {
            'rest_compliance': {
                'description': 'Driver rest timers, activity continuity and dispatch availability',
                'endpoints': {
                    'rest_timer': 'POST /api/compliance/rest-timer/ - Time on duty or until rest ends',
                    'activity_gaps': 'POST /api/compliance/activity-gaps/ - Gaps in activity history',
                    'weekly_hours': 'POST /api/compliance/weekly-hours/ - Hours worked in the working block',
                    'availability': 'POST /api/compliance/availability/ - Start/end shift decision',
                    'availability_sheet': 'POST /api/compliance/availability-sheet/ - Rows ordered by shift timer',
                }
            }
        }
    })

urlpatterns = [
    # API root
    path("api/", api_root, name='api-root'),

    # Rest Compliance API
    path("api/compliance/", include("rest_compliance.urls")),
]
