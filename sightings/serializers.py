from rest_framework import serializers

from sightings.models import Comment, Photo, Report
from sightings.models.report import ADMIN_NOTE_MAX_LENGTH, REASON_MAX_LENGTH
from sightings.reportables import target_for
from sightings.repos.report_repo import ReportRepo


def _iso(value):
    return value.isoformat() if value else None


def _user_summary(user):
    if user is None:
        return None
    return {"id": str(user.pk), "display_name": str(user)}


def _cached_target(report):
    """Resolve the report's target once per instance; list views touch it several times."""
    if not hasattr(report, "_target_cache"):
        report._target_cache = target_for(report)
    return report._target_cache


class ReportSerializer(serializers.ModelSerializer):
    """Summary of a report for the admin list view."""
    reporter = serializers.SerializerMethodField()
    reportable = serializers.SerializerMethodField()
    content_owner = serializers.SerializerMethodField()
    resolved_by = serializers.SerializerMethodField()

    class Meta:
        model = Report
        fields = [
            "id",
            "reason",
            "status",
            "admin_note",
            "reporter",
            "reportable",
            "content_owner",
            "resolved_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_reporter(self, report):
        reporter = report.reporter
        if reporter is None:
            return None
        return {
            "id": str(reporter.pk),
            "display_name": str(reporter),
            "email": reporter.email,
            "avatar_url": reporter.avatar_url,
        }

    def get_reportable(self, report):
        target = _cached_target(report)
        if target is None:
            return None
        return {"id": str(target.content_id), "type": target.kind, "preview": target.preview()}

    def get_content_owner(self, report):
        target = _cached_target(report)
        owner = target.owner if target else None
        if owner is None:
            return None
        return {
            "id": str(owner.pk),
            "display_name": str(owner),
            "violation_flagged": owner.violation_flagged,
        }

    def get_resolved_by(self, report):
        return _user_summary(report.resolved_by)


class ReportDetailSerializer(ReportSerializer):
    """Full report information for the admin detail and process views."""
    related_reports = serializers.SerializerMethodField()

    class Meta(ReportSerializer.Meta):
        fields = ReportSerializer.Meta.fields + ["related_reports"]
        read_only_fields = fields

    def get_reporter(self, report):
        summary = super().get_reporter(report)
        if summary is None:
            return None
        summary.update(
            created_at=_iso(report.reporter.date_joined),
            report_count=Report.objects.filter(reporter_id=report.reporter_id).count(),
        )
        return summary

    def get_reportable(self, report):
        target = _cached_target(report)
        if target is None:
            return None
        content = target.content
        base = {
            "id": str(content.pk),
            "type": target.kind,
            "created_at": _iso(content.created_at),
            "is_visible": content.is_visible,
        }
        if isinstance(content, Photo):
            base.update(
                title=content.title,
                description=content.description,
                moderation_status=content.moderation_status,
                image_url=content.image_url,
            )
        elif isinstance(content, Comment):
            base.update(
                content=content.content,
                photo_id=str(content.photo_id),
                deleted_at=_iso(content.deleted_at),
            )
        return base

    def get_content_owner(self, report):
        summary = super().get_content_owner(report)
        if summary is None:
            return None
        owner = _cached_target(report).owner
        summary.update(
            email=owner.email,
            violation_count=owner.violation_count,
            created_at=_iso(owner.date_joined),
            photo_count=owner.photos.count(),
            total_reports_against=ReportRepo().count_against(owner),
        )
        return summary

    def get_related_reports(self, report):
        return [
            {
                "id": str(related.pk),
                "status": related.status,
                "reason": related.reason[:100],
                "created_at": _iso(related.created_at),
            }
            for related in ReportRepo().related(report)
        ]


class ProcessReportSerializer(serializers.Serializer):
    """Body of POST /admin/reports/<id>/process; the action itself is checked by the service."""
    moderation_action = serializers.CharField(required=False, allow_blank=True, default="")
    admin_note = serializers.CharField(
        required=False,
        allow_null=True,
        allow_blank=True,
        max_length=ADMIN_NOTE_MAX_LENGTH,
        default=None,
    )


class ReportCreateSerializer(serializers.Serializer):
    """Body of POST /reports; presence rules are enforced by ReportingService."""
    reportable_type = serializers.CharField(required=False, allow_blank=True, default="")
    reportable_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    reason = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=REASON_MAX_LENGTH, trim_whitespace=True
    )
