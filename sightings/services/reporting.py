"""Service helpers for reporting photos or comments."""

import logging

from django.utils.translation import gettext as _

from sightings.errors import ErrorCodes, ResourceNotFound, ValidationFailed
from sightings.models import Report
from sightings.reportables import REPORTABLE_TYPES, load_content

logger = logging.getLogger(__name__)


class ReportingService:
    """Encapsulate report target lookup and report persistence."""

    def __init__(self, report_model=Report):
        self.report_model = report_model

    def fetch_target(self, reportable_type, reportable_id):
        """Return the Photo/Comment being reported or raise a 4xx ApiError."""
        if reportable_type not in REPORTABLE_TYPES:
            raise ValidationFailed(
                _("Invalid reportable type. Must be 'Photo' or 'Comment'."),
                details={"valid_types": list(REPORTABLE_TYPES)},
            )
        content = load_content(reportable_type, reportable_id)
        if content is None:
            raise ResourceNotFound(_("%(type)s not found.") % {"type": reportable_type})
        return content

    def file_report(self, reporter, reportable_type, reportable_id, reason):
        """Create a pending report from `reporter` against the given content."""
        if not reportable_type or not reportable_id:
            raise ValidationFailed(
                _("Reportable type and ID are required."), code=ErrorCodes.REQUIRED_FIELD_MISSING
            )
        if not reason or not reason.strip():
            raise ValidationFailed(_("Reason is required."), code=ErrorCodes.REQUIRED_FIELD_MISSING)

        content = self.fetch_target(reportable_type, reportable_id)

        if content.owned_by(reporter):
            raise ValidationFailed(_("You cannot report your own content."))

        already_pending = (
            self.report_model.objects.pending()
            .for_content(content)
            .filter(reporter=reporter)
            .exists()
        )
        if already_pending:
            raise ValidationFailed(_("You have already reported this content."))

        report = self.report_model.objects.create(
            reporter=reporter,
            reportable_type=reportable_type,
            reportable_id=content.pk,
            reason=reason.strip(),
        )
        logger.info("Report %s filed by %s against %s %s", report.pk, reporter.pk, reportable_type, content.pk)
        return report
