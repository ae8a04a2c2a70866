"""Push and in-app notification delivery."""

import logging
import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.db import transaction
from django.utils import timezone

from sightings import firebase_admin_client
from sightings.errors import ErrorCodes
from sightings.models import DeviceToken, Notification

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_SETTINGS = {
    "rainbow_alerts": True,
    "likes": True,
    "comments": True,
    "system": True,
    "quiet_hours_start": None,
    "quiet_hours_end": None,
    "timezone": "Asia/Tokyo",
}

# notification_type -> key in User.notification_settings
SETTING_FOR_TYPE = {
    Notification.TYPE_RAINBOW_ALERT: "rainbow_alerts",
    Notification.TYPE_LIKE: "likes",
    Notification.TYPE_COMMENT: "comments",
    Notification.TYPE_SYSTEM: "system",
}

TIME_FORMAT = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def _parse_minutes(value):
    """Parse "HH:MM" into minutes since midnight; None when malformed."""
    if not isinstance(value, str) or not TIME_FORMAT.match(value):
        return None
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class NotificationService:
    """
    Deliver notifications to a user's devices and in-app inbox.

    `send_push_notification` never raises: delivery is best-effort and every
    failure comes back as an error result after being logged.
    """

    def __init__(self, notification_model=Notification, device_token_model=DeviceToken, push_client=firebase_admin_client):
        self.notification_model = notification_model
        self.device_token_model = device_token_model
        self.push_client = push_client

    def settings_for(self, user):
        """User's notification settings merged over the defaults."""
        merged = dict(DEFAULT_NOTIFICATION_SETTINGS)
        merged.update(getattr(user, "notification_settings", None) or {})
        return merged

    def in_quiet_hours(self, user, now=None):
        """True when `now` falls inside the user's quiet hours (overnight ranges allowed)."""
        prefs = self.settings_for(user)
        start = _parse_minutes(prefs.get("quiet_hours_start"))
        end = _parse_minutes(prefs.get("quiet_hours_end"))
        if start is None or end is None:
            return False

        try:
            tz = ZoneInfo(prefs.get("timezone") or DEFAULT_NOTIFICATION_SETTINGS["timezone"])
        except (ZoneInfoNotFoundError, ValueError):
            tz = ZoneInfo(DEFAULT_NOTIFICATION_SETTINGS["timezone"])
        local = (now or timezone.now()).astimezone(tz)
        current = local.hour * 60 + local.minute

        if start <= end:
            return start <= current < end
        return current >= start or current < end

    def notification_enabled(self, user, notification_type):
        key = SETTING_FOR_TYPE.get(notification_type)
        if key is None:
            return True
        return bool(self.settings_for(user).get(key, True))

    def send_push_notification(
        self,
        user,
        title,
        body,
        data=None,
        notification_type=Notification.TYPE_SYSTEM,
        *,
        save_to_db=True,
        skip_quiet_hours_check=False,
        now=None,
    ):
        """Send a push to every active device of `user` and record it in-app."""
        if user is None:
            return {"success": False, "error": {"code": ErrorCodes.USER_NOT_FOUND, "message": "User not found"}}

        try:
            if not skip_quiet_hours_check and self.in_quiet_hours(user, now=now):
                return {"success": True, "skipped": True, "reason": "quiet_hours"}
            if not self.notification_enabled(user, notification_type):
                return {"success": True, "skipped": True, "reason": "disabled_by_user"}

            if save_to_db:
                with transaction.atomic():
                    self.notification_model.objects.create(
                        recipient=user,
                        notification_type=notification_type,
                        title=title,
                        body=body,
                        data=data or {},
                    )

            results = self._send_to_user_devices(user, title, body, data or {})
        except Exception as e:
            logger.error("send_push_notification to user %s failed: %s", getattr(user, "pk", None), e)
            return {
                "success": False,
                "error": {"code": ErrorCodes.PUSH_DELIVERY_ERROR, "message": str(e)},
            }

        return {
            "success": True,
            "devices_sent": sum(1 for r in results if r["success"]),
            "devices_failed": sum(1 for r in results if not r["success"]),
            "results": results,
        }

    def _send_to_user_devices(self, user, title, body, data):
        tokens = list(
            self.device_token_model.objects.filter(user=user, is_active=True).values_list("token", flat=True)
        )
        if not tokens or not self.push_client.is_configured():
            return []

        results = self.push_client.send_to_devices(tokens, title, body, data)
        stale = [r["token"] for r in results if r.get("unregistered")]
        if stale:
            self.device_token_model.objects.filter(token__in=stale).update(is_active=False)
            logger.info("Deactivated %s unregistered device tokens for user %s", len(stale), user.pk)
        return results

