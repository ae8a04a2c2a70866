"""Model for user-submitted reports against photos or comments."""

import uuid
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from sightings.errors import ReportAlreadyReviewed

REASON_MAX_LENGTH = 1000
ADMIN_NOTE_MAX_LENGTH = 2000


class ReportQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=Report.STATUS_PENDING)

    def resolved(self):
        return self.filter(status=Report.STATUS_RESOLVED)

    def dismissed(self):
        return self.filter(status=Report.STATUS_DISMISSED)

    def recent(self):
        return self.order_by("-created_at")

    def photo_reports(self):
        return self.filter(reportable_type=Report.TYPE_PHOTO)

    def comment_reports(self):
        return self.filter(reportable_type=Report.TYPE_COMMENT)

    def for_content(self, content):
        """Reports pointing at the given Photo or Comment instance."""
        return self.filter(reportable_type=type(content).__name__, reportable_id=content.pk)


class Report(models.Model):
    """
    Report filed by a user against one Photo or Comment.

    The reported content is referenced by (`reportable_type`, `reportable_id`)
    and never changes after creation. Status moves once, from pending to
    resolved or dismissed, through `resolve`/`dismiss`.
    """
    STATUS_PENDING = "pending"
    STATUS_RESOLVED = "resolved"
    STATUS_DISMISSED = "dismissed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_RESOLVED, "Resolved"),
        (STATUS_DISMISSED, "Dismissed"),
    ]

    TYPE_PHOTO = "Photo"
    TYPE_COMMENT = "Comment"

    REPORTABLE_TYPE_CHOICES = [
        (TYPE_PHOTO, "Photo"),
        (TYPE_COMMENT, "Comment"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Reports outlive accounts; users are retired through `deleted_at`.
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='submitted_reports',
    )

    reportable_type = models.CharField(max_length=20, choices=REPORTABLE_TYPE_CHOICES)
    reportable_id = models.UUIDField()

    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='resolved_reports',
    )

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    reason = models.TextField(max_length=REASON_MAX_LENGTH)
    admin_note = models.TextField(max_length=ADMIN_NOTE_MAX_LENGTH, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReportQuerySet.as_manager()

    class Meta:
        """Ordering, table name and lookup index for reports."""
        db_table = 'reports'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['reportable_type', 'reportable_id'], name='reports_reportable_idx'),
        ]

    def __str__(self):
        """Readable summary of the report target and reporter."""
        return f"Report on {self.reportable_type} by {self.reporter.username}"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        loaded = (instance.__dict__.get("reportable_type"), instance.__dict__.get("reportable_id"))
        instance._loaded_reportable = loaded if None not in loaded else None
        return instance

    def save(self, *args, **kwargs):
        """Refuse to repoint an existing report at different content."""
        loaded = getattr(self, "_loaded_reportable", None)
        if loaded and loaded != (self.reportable_type, self.reportable_id):
            raise ValidationError({"reportable": "A report's content cannot change after creation."})
        super().save(*args, **kwargs)
        self._loaded_reportable = (self.reportable_type, self.reportable_id)

    @property
    def is_reviewed(self):
        """True once the report has been resolved or dismissed."""
        return self.status in (self.STATUS_RESOLVED, self.STATUS_DISMISSED)

    @property
    def reportable(self):
        """The reported Photo or Comment, or None when it no longer exists."""
        from sightings.reportables import load_content
        return load_content(self.reportable_type, self.reportable_id)

    @property
    def reporter_name(self):
        return str(self.reporter) if self.reporter_id else None

    @property
    def resolver_name(self):
        return str(self.resolved_by) if self.resolved_by_id else None

    def filed_by(self, user):
        return user is not None and self.reporter_id == user.pk

    def resolve(self, admin, note=None):
        """Mark the report resolved by `admin`; only valid while pending."""
        self._transition(self.STATUS_RESOLVED, admin, note)

    def dismiss(self, admin, note=None):
        """Mark the report dismissed by `admin`; only valid while pending."""
        self._transition(self.STATUS_DISMISSED, admin, note)

    def _transition(self, new_status, admin, note):
        if admin is None:
            raise ValidationError({"resolved_by": "A reviewing admin is required."})
        if note is not None and len(note) > ADMIN_NOTE_MAX_LENGTH:
            raise ValidationError(
                {"admin_note": f"Ensure this value has at most {ADMIN_NOTE_MAX_LENGTH} characters."}
            )

        now = timezone.now()
        updated = type(self).objects.filter(pk=self.pk, status=self.STATUS_PENDING).update(
            status=new_status,
            resolved_by=admin,
            admin_note=note,
            updated_at=now,
        )
        if updated != 1:
            raise ReportAlreadyReviewed(f"Report {self.pk} has already been reviewed")

        self.status = new_status
        self.resolved_by = admin
        self.admin_note = note
        self.updated_at = now
