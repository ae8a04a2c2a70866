from django.utils.translation import gettext as _
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from sightings.serializers import ReportCreateSerializer
from sightings.services.reporting import ReportingService


class ReportCreateApi(APIView):
    """Let a signed-in user report a photo or comment for admin review."""
    permission_classes = [IsAuthenticated]

    def get_reporting_service(self):
        return ReportingService()

    def post(self, request):
        serializer = ReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        report = self.get_reporting_service().file_report(
            request.user,
            data["reportable_type"],
            data["reportable_id"],
            data["reason"],
        )
        return Response(
            {
                "data": {
                    "report_id": str(report.pk),
                    "message": _("Report submitted. Thank you for helping keep the community safe."),
                }
            },
            status=status.HTTP_201_CREATED,
        )
