"""Repository helpers for the admin report list."""

import math
from typing import Any, Dict, Optional, Tuple

from django.conf import settings
from django.db.models import Count, Q, QuerySet

from sightings.models import Comment, Photo, Report

SORTABLE_FIELDS = ("created_at", "updated_at", "status")


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class ReportRepo:
    """Repository for Report queries (filtered lists, paging, status stats)."""

    def __init__(self) -> None:
        """Initialise with the Report model and page-size settings."""
        self.model = Report
        self.default_per_page = getattr(settings, "REPORTS_DEFAULT_PAGE_SIZE", 20)
        self.max_per_page = getattr(settings, "REPORTS_MAX_PAGE_SIZE", 100)

    def filtered(
        self,
        *,
        status: Optional[str] = None,
        reportable_type: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> QuerySet:
        """Return reports matching the filters, sorted (newest first by default)."""
        qs = self.model.objects.select_related("reporter", "resolved_by")
        if status:
            qs = qs.filter(status=status)
        if reportable_type:
            qs = qs.filter(reportable_type=reportable_type)

        field = sort_by if sort_by in SORTABLE_FIELDS else "created_at"
        prefix = "" if sort_order == "asc" else "-"
        return qs.order_by(f"{prefix}{field}", f"{prefix}id")

    def page_params(self, page: Any, per_page: Any) -> Tuple[int, int]:
        """Clamp raw query params to page >= 1 and 1 <= per_page <= max."""
        page_number = max(_to_int(page, 1), 1)
        size = _to_int(per_page, self.default_per_page)
        if size <= 0:
            size = self.default_per_page
        return page_number, min(size, self.max_per_page)

    def paginate(self, qs: QuerySet, page: Any = None, per_page: Any = None) -> Tuple[QuerySet, Dict[str, int]]:
        """Slice one page out of `qs` and describe it."""
        page_number, size = self.page_params(page, per_page)
        total_count = qs.count()
        start = (page_number - 1) * size
        meta = {
            "current_page": page_number,
            "total_pages": math.ceil(total_count / size) if total_count else 0,
            "total_count": total_count,
            "per_page": size,
        }
        return qs[start:start + size], meta

    def stats(self) -> Dict[str, int]:
        """Report counts per status."""
        counts = self.model.objects.aggregate(
            pending_count=Count("id", filter=Q(status=Report.STATUS_PENDING)),
            resolved_count=Count("id", filter=Q(status=Report.STATUS_RESOLVED)),
            dismissed_count=Count("id", filter=Q(status=Report.STATUS_DISMISSED)),
        )
        return {key: value or 0 for key, value in counts.items()}

    def related(self, report: Report, limit: int = 5) -> QuerySet:
        """Other reports against the same content."""
        return (
            self.model.objects.filter(reportable_type=report.reportable_type, reportable_id=report.reportable_id)
            .exclude(pk=report.pk)
            .order_by("-created_at")[:limit]
        )

    def count_against(self, owner) -> int:
        """All reports, in any status, against the owner's photos and comments."""
        photo_reports = self.model.objects.photo_reports().filter(
            reportable_id__in=Photo.objects.filter(user=owner).values("id")
        ).count()
        comment_reports = self.model.objects.comment_reports().filter(
            reportable_id__in=Comment.objects.filter(user=owner).values("id")
        ).count()
        return photo_reports + comment_reports
