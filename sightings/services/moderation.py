"""
Moderation service for admin report processing.

Handles:
- Approving a report (dismiss it, content untouched)
- Hiding or deleting reported content and resolving the report
- Recounting the content owner's violations and flagging repeat offenders
- Notifying the content owner once the decision is committed
"""

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext as _
from rest_framework import status

from sightings.errors import ErrorCodes, ReportAlreadyReviewed, ReportableMissing
from sightings.models import Notification, Report
from sightings.reportables import target_for
from sightings.services.notifications import NotificationService
from sightings.services.violations import ViolationAccountant

logger = logging.getLogger(__name__)

ACTION_APPROVE = "approve"
ACTION_HIDE = "hide"
ACTION_DELETE = "delete"

VALID_ACTIONS = (ACTION_APPROVE, ACTION_HIDE, ACTION_DELETE)

# moderation action -> outcome reported to the content owner
OUTCOMES = {
    ACTION_HIDE: "hidden",
    ACTION_DELETE: "deleted",
}


def success_message(action):
    """Human-readable confirmation for a processed action."""
    messages = {
        ACTION_APPROVE: _("Report dismissed. The content remains visible."),
        ACTION_HIDE: _("Content hidden and report resolved."),
        ACTION_DELETE: _("Content deleted and report resolved."),
    }
    return messages[action]


@dataclass
class ModerationResult:
    """Outcome of one `process_report` call."""

    success: bool
    action: Optional[str] = None
    report_id: Any = None
    user_flagged: bool = False
    error: Optional[dict] = None
    http_status: int = status.HTTP_200_OK
    exception: Optional[BaseException] = field(default=None, repr=False)

    @classmethod
    def failure(cls, code, message, http_status, *, action=None, report_id=None, details=None, exception=None):
        error = {"code": code, "message": message}
        if details:
            error["details"] = details
        return cls(
            success=False,
            action=action,
            report_id=report_id,
            error=error,
            http_status=http_status,
            exception=exception,
        )


class ModerationService:
    """Apply an admin's moderation decision to a report and its content."""

    def __init__(self, notification_service=None, accountant=None, report_model=Report):
        self.notification_service = notification_service or NotificationService()
        self.accountant = accountant or ViolationAccountant()
        self.report_model = report_model

    def process_report(self, report_id, action, admin, note=None):
        """
        Process one report with `action` on behalf of `admin`.

        Content mutation, report transition and violation accounting commit
        together or not at all. The owner notification is queued for after
        the commit and can never turn a committed action into a failure.
        """
        if action not in VALID_ACTIONS:
            return ModerationResult.failure(
                ErrorCodes.VALIDATION_FAILED,
                _("Invalid moderation action."),
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                action=action,
                report_id=report_id,
                details={"valid_actions": list(VALID_ACTIONS)},
            )

        fail = partial(ModerationResult.failure, action=action, report_id=report_id)
        try:
            with transaction.atomic():
                user_flagged = self._apply(report_id, action, admin, note)
        except self.report_model.DoesNotExist:
            return fail(ErrorCodes.RESOURCE_NOT_FOUND, _("Report not found."), status.HTTP_404_NOT_FOUND)
        except ReportAlreadyReviewed as e:
            logger.info("Report %s already reviewed, %s rejected", report_id, action)
            return fail(
                ErrorCodes.ALREADY_PROCESSED,
                _("This report has already been processed."),
                status.HTTP_409_CONFLICT,
                exception=e,
            )
        except ReportableMissing as e:
            return fail(
                ErrorCodes.RESOURCE_NOT_FOUND,
                _("The reported content no longer exists."),
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                exception=e,
            )
        except ValidationError as e:
            details = e.message_dict if hasattr(e, "error_dict") else {"errors": e.messages}
            return fail(
                ErrorCodes.VALIDATION_FAILED,
                "; ".join(e.messages),
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                details=details,
                exception=e,
            )
        except Exception as e:
            logger.exception("process_report %s (%s) failed", report_id, action)
            return fail(
                ErrorCodes.INTERNAL_ERROR,
                _("The report could not be processed."),
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                exception=e,
            )

        logger.info(
            "Report %s processed with %s by admin %s (user_flagged=%s)",
            report_id, action, getattr(admin, "pk", None), user_flagged,
        )
        return ModerationResult(success=True, action=action, report_id=report_id, user_flagged=user_flagged)

    def _apply(self, report_id, action, admin, note):
        """Run inside the transaction; returns whether the owner was newly flagged."""
        report = self.report_model.objects.select_for_update().get(pk=report_id)
        if report.is_reviewed:
            raise ReportAlreadyReviewed(f"Report {report.pk} is already {report.status}")

        if action == ACTION_APPROVE:
            report.dismiss(admin, note=note)
            return False

        target = target_for(report, for_update=True)
        if target is None:
            raise ReportableMissing(f"{report.reportable_type} {report.reportable_id} not found")

        if action == ACTION_HIDE:
            target.hide()
        else:
            target.delete()
        report.resolve(admin, note=note)
        user_flagged = self.accountant.recount_and_maybe_flag(target.owner)

        transaction.on_commit(partial(self.notify_content_owner, target, OUTCOMES[action]))
        return user_flagged

    def notify_content_owner(self, target, outcome):
        """Tell the owner their content was hidden/deleted; failures are logged, never raised."""
        owner = target.owner
        if owner is None:
            return
        try:
            content_label = _("photo") if target.kind == Report.TYPE_PHOTO else _("comment")
            if outcome == "hidden":
                title = _("Your content has been hidden")
                body = _("Your %(content_type)s was hidden for violating the community guidelines.")
            else:
                title = _("Your content has been deleted")
                body = _("Your %(content_type)s was deleted for violating the community guidelines.")

            result = self.notification_service.send_push_notification(
                owner,
                title,
                body % {"content_type": content_label},
                data={
                    "type": "moderation",
                    "action": outcome,
                    "content_type": target.content_type,
                    "content_id": str(target.content_id),
                },
                notification_type=Notification.TYPE_SYSTEM,
            )
            if not result.get("success"):
                logger.warning("Moderation notice to user %s not delivered: %s", owner.pk, result.get("error"))
        except Exception as e:
            logger.warning("Failed to send moderation notification to user %s: %s", owner.pk, e)
