"""
Reportable content targets.

A report points at exactly one Photo or Comment. Each variant is wrapped in a
target class that states its moderation capabilities explicitly instead of
probing model attributes:

- PhotoTarget: has a moderation status; hide/delete set it and drop visibility.
- CommentTarget: visibility flag only; delete also stamps `deleted_at`.

`target_for(report)` is the single entry point the moderation services use.
"""

from django.utils import timezone

from sightings.models import Comment, Photo, Report


class ReportableTarget:
    """Common surface over the content a report can point at."""
    kind = None
    model = None
    has_moderation_status = False

    def __init__(self, content):
        self.content = content

    @property
    def content_id(self):
        return self.content.pk

    @property
    def content_type(self):
        """Lower-case content label used in notifications ("photo", "comment")."""
        return self.kind.lower()

    @property
    def owner(self):
        """The owning user, or None when the owner's account is gone."""
        return self.content.user

    @property
    def owner_id(self):
        return self.content.user_id

    def hide(self):
        raise NotImplementedError

    def delete(self):
        raise NotImplementedError

    def preview(self):
        raise NotImplementedError


class PhotoTarget(ReportableTarget):
    kind = Report.TYPE_PHOTO
    model = Photo
    has_moderation_status = True

    def hide(self):
        self.content.moderation_status = Photo.MODERATION_HIDDEN
        self.content.is_visible = False
        self.content.save(update_fields=["moderation_status", "is_visible", "updated_at"])

    def delete(self):
        self.content.moderation_status = Photo.MODERATION_DELETED
        self.content.is_visible = False
        self.content.save(update_fields=["moderation_status", "is_visible", "updated_at"])

    def preview(self):
        return self.content.title or f"Photo #{self.content.pk}"


class CommentTarget(ReportableTarget):
    kind = Report.TYPE_COMMENT
    model = Comment

    def hide(self):
        self.content.is_visible = False
        self.content.save(update_fields=["is_visible", "updated_at"])

    def delete(self):
        self.content.is_visible = False
        self.content.deleted_at = timezone.now()
        self.content.save(update_fields=["is_visible", "deleted_at", "updated_at"])

    def preview(self):
        text = self.content.content
        return text if len(text) <= 100 else text[:97] + "..."


TARGETS = {
    PhotoTarget.kind: PhotoTarget,
    CommentTarget.kind: CommentTarget,
}

REPORTABLE_TYPES = tuple(TARGETS)


def load_content(reportable_type, reportable_id, *, for_update=False):
    """Fetch the Photo/Comment behind a reference, or None if it is gone."""
    target_cls = TARGETS.get(reportable_type)
    if target_cls is None:
        return None
    queryset = target_cls.model.objects.select_related("user")
    if for_update:
        queryset = queryset.select_for_update(of=("self",))
    return queryset.filter(pk=reportable_id).first()


def target_for_content(content):
    """Wrap a Photo or Comment instance in its target class."""
    target_cls = TARGETS.get(type(content).__name__)
    if target_cls is None:
        raise TypeError(f"{type(content).__name__} cannot be reported")
    return target_cls(content)


def target_for(report, *, for_update=False):
    """Resolve the target a report points at, or None if the content is gone."""
    content = load_content(report.reportable_type, report.reportable_id, for_update=for_update)
    if content is None:
        return None
    return target_for_content(content)
