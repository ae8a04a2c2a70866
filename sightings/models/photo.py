"""
Photo model

A rainbow sighting posted by a user. Only the columns moderation reads or
writes live here; upload and geodata handling belong to other services.

- `is_visible` drops the photo from public feeds.
- `moderation_status` records the admin decision (approved/hidden/deleted);
  new photos start approved, `pending` is reserved for pre-moderation.
"""

import uuid
from django.conf import settings
from django.db import models


class Photo(models.Model):
    MODERATION_PENDING = "pending"
    MODERATION_APPROVED = "approved"
    MODERATION_HIDDEN = "hidden"
    MODERATION_DELETED = "deleted"

    MODERATION_CHOICES = [
        (MODERATION_PENDING, "Pending"),
        (MODERATION_APPROVED, "Approved"),
        (MODERATION_HIDDEN, "Hidden"),
        (MODERATION_DELETED, "Deleted"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='photos',
        db_column='user_id',
    )

    title = models.CharField(max_length=100, blank=True)
    description = models.TextField(max_length=500, blank=True)
    image_url = models.CharField(max_length=500, blank=True)

    is_visible = models.BooleanField(default=True)
    moderation_status = models.CharField(
        max_length=10,
        choices=MODERATION_CHOICES,
        default=MODERATION_APPROVED,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'photos'
        ordering = ['-created_at']

    def __str__(self):
        return self.title or f"Photo #{self.id}"

    def owned_by(self, user):
        return user is not None and self.user_id == user.pk
