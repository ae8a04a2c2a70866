"""Model for user comments on photos."""

import uuid
from django.conf import settings
from django.db import models
from .photo import Photo


class Comment(models.Model):
    """User-authored comment on a photo."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    photo = models.ForeignKey(
        Photo,
        on_delete=models.CASCADE,
        db_column='photo_id',
        related_name='comments',
    )

    # Nulled when the author's account is deleted; the comment stays anonymised.
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        db_column='user_id',
        related_name='comments',
    )

    content = models.TextField(max_length=500)

    is_visible = models.BooleanField(default=True, help_text="Hidden by admin due to reports")
    deleted_at = models.DateTimeField(null=True, blank=True, help_text="Removed by admin due to reports")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """DB table name and ordering for comments."""
        db_table = "comments"
        ordering = ['created_at']

    def __str__(self):
        """Readable identifier for admin/debugging."""
        return f"Comment by {self.user_id} on {self.photo_id}"

    def owned_by(self, user):
        return user is not None and self.user_id == user.pk
