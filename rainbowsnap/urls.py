"""
URL configuration for the rainbowsnap project.

Public API lives under /api/v1/; admin moderation endpoints under
/api/v1/admin/. The Django admin site is mounted at /admin/.
"""
from django.contrib import admin
from django.urls import path
from sightings.views import health
from sightings.views.admin_report_views import (
    AdminReportDetailApi,
    AdminReportListApi,
    AdminReportProcessApi,
)
from sightings.views.report_views import ReportCreateApi

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health', health, name='health'),
    path('api/v1/reports', ReportCreateApi.as_view(), name='report_create'),
    path('api/v1/admin/reports', AdminReportListApi.as_view(), name='admin_report_list'),
    path('api/v1/admin/reports/<uuid:report_id>', AdminReportDetailApi.as_view(), name='admin_report_detail'),
    path(
        'api/v1/admin/reports/<uuid:report_id>/process',
        AdminReportProcessApi.as_view(),
        name='admin_report_process',
    ),
]
