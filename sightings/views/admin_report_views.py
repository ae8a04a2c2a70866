"""
Admin endpoints for content-moderation reports.

Endpoints:
- GET  /api/v1/admin/reports: paginated, filterable report list with status stats
- GET  /api/v1/admin/reports/<id>: report details with content and owner info
- POST /api/v1/admin/reports/<id>/process: approve, hide or delete
"""

from django.shortcuts import get_object_or_404
from rest_framework.response import Response
from rest_framework.views import APIView

from sightings.models import Report
from sightings.permissions import IsAdminRole
from sightings.repos.report_repo import ReportRepo
from sightings.serializers import ProcessReportSerializer, ReportDetailSerializer, ReportSerializer
from sightings.services.moderation import ModerationService, success_message


def _report_queryset():
    return Report.objects.select_related("reporter", "resolved_by")


class AdminReportListApi(APIView):
    """List reports with filters (status, reportable_type), sorting and paging."""
    permission_classes = [IsAdminRole]

    def get(self, request):
        repo = ReportRepo()
        params = request.query_params
        reports = repo.filtered(
            status=params.get("status"),
            reportable_type=params.get("reportable_type"),
            sort_by=params.get("sort_by"),
            sort_order=params.get("sort_order"),
        )
        page, pagination = repo.paginate(reports, params.get("page"), params.get("per_page"))
        return Response({
            "data": {
                "reports": ReportSerializer(page, many=True).data,
                "pagination": pagination,
                "stats": repo.stats(),
            }
        })


class AdminReportDetailApi(APIView):
    """Show one report with its reported content and owner history."""
    permission_classes = [IsAdminRole]

    def get(self, request, report_id):
        report = get_object_or_404(_report_queryset(), pk=report_id)
        self.check_object_permissions(request, report)
        return Response({"data": {"report": ReportDetailSerializer(report).data}})


class AdminReportProcessApi(APIView):
    """Apply an admin moderation decision to a report."""
    permission_classes = [IsAdminRole]

    def get_moderation_service(self):
        return ModerationService()

    def post(self, request, report_id):
        report = get_object_or_404(Report, pk=report_id)
        self.check_object_permissions(request, report)

        serializer = ProcessReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        action = serializer.validated_data["moderation_action"]

        result = self.get_moderation_service().process_report(
            report.pk,
            action,
            request.user,
            note=serializer.validated_data["admin_note"],
        )
        if not result.success:
            return Response({"error": result.error}, status=result.http_status)

        report = _report_queryset().get(pk=report.pk)
        return Response({
            "data": {
                "report": ReportDetailSerializer(report).data,
                "message": success_message(action),
                "user_flagged": result.user_flagged,
            }
        })
