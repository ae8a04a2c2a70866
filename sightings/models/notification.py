from django.conf import settings
from django.db import models

"""
Notification model

In-app copy of every push the service sends (the mobile "bell" list).

- `recipient`: who receives the notification
- `notification_type`: rainbow_alert / like / comment / system
  (moderation notices go out as `system`)
- `title`/`body`: rendered text, already translated
- `data`: JSON payload mirrored into the FCM message
- `is_read`: whether the recipient has opened it
"""

class Notification(models.Model):
    TYPE_RAINBOW_ALERT = 'rainbow_alert'
    TYPE_LIKE = 'like'
    TYPE_COMMENT = 'comment'
    TYPE_SYSTEM = 'system'

    TYPES = [
        (TYPE_RAINBOW_ALERT, 'Rainbow alert'),
        (TYPE_LIKE, 'Like'),
        (TYPE_COMMENT, 'Comment'),
        (TYPE_SYSTEM, 'System'),
    ]

    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='notifications', on_delete=models.CASCADE)
    notification_type = models.CharField(max_length=20, choices=TYPES)
    title = models.CharField(max_length=255, blank=True)
    body = models.TextField(blank=True)
    data = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']

    def __str__(self):
        return f"Notification for {self.recipient}: {self.notification_type}"
