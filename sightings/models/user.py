"""Custom user model with moderation and notification metadata."""

import uuid
from django.contrib.auth.models import AbstractUser
from django.db import models
from libgravatar import Gravatar


class User(AbstractUser):
    """Account for photographers, commenters and admins."""
    ROLE_USER = "user"
    ROLE_ADMIN = "admin"

    ROLE_CHOICES = [
        (ROLE_USER, "User"),
        (ROLE_ADMIN, "Admin"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, blank=False)
    display_name = models.CharField(max_length=30, blank=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_USER)

    # Set by the Firebase auth backend; empty for session-only accounts.
    firebase_uid = models.CharField(max_length=128, unique=True, null=True, blank=True)

    # Recomputed from resolved reports on every hide/delete against this user's content.
    violation_count = models.PositiveIntegerField(default=0)
    violation_flagged = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Flagged for admin attention after repeated violations",
    )

    # rainbow_alerts/likes/comments/system toggles, quiet_hours_start/end ("HH:MM"), timezone
    notification_settings = models.JSONField(default=dict, blank=True)

    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        """Table name and default ordering for users."""
        db_table = "users"
        ordering = ["username"]

    def __str__(self):
        return self.display_name or self.username

    @property
    def is_admin(self):
        """True for accounts holding the admin role."""
        return self.role == self.ROLE_ADMIN

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def gravatar(self, size=120):
        """Return gravatar URL for the user's email."""
        gravatar_object = Gravatar(self.email)
        return gravatar_object.get_image(size=size, default='mp')

    @property
    def avatar_url(self):
        """Avatar shown next to the user in admin payloads."""
        return self.gravatar(size=60)
