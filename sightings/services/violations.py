"""Violation accounting for content owners."""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model

from sightings.models import Comment, Photo, Report

logger = logging.getLogger(__name__)

DEFAULT_VIOLATION_THRESHOLD = 3


class ViolationAccountant:
    """
    Recount a user's violations and flag them once the threshold is reached.

    A violation is a resolved report against a Photo or Comment the user owns.
    The count is always recomputed from the reports table, never incremented,
    so corrections to report history are picked up on the next recount.
    """

    def __init__(self, threshold=None, report_model=Report, photo_model=Photo, comment_model=Comment):
        if threshold is None:
            threshold = getattr(settings, "MODERATION_VIOLATION_THRESHOLD", DEFAULT_VIOLATION_THRESHOLD)
        self.threshold = threshold
        self.report_model = report_model
        self.photo_model = photo_model
        self.comment_model = comment_model

    def count_violations(self, owner):
        """Return the number of resolved reports against the owner's photos and comments."""
        if owner is None:
            return 0
        resolved = self.report_model.objects.resolved()
        photo_violations = resolved.filter(
            reportable_type=Report.TYPE_PHOTO,
            reportable_id__in=self.photo_model.objects.filter(user=owner).values("id"),
        ).count()
        comment_violations = resolved.filter(
            reportable_type=Report.TYPE_COMMENT,
            reportable_id__in=self.comment_model.objects.filter(user=owner).values("id"),
        ).count()
        return photo_violations + comment_violations

    def recount_and_maybe_flag(self, owner):
        """
        Persist the owner's recomputed violation count.

        Returns True only when this call moved the owner from unflagged to
        flagged. The flag write is conditional on the stored flag still being
        false, so concurrent recounts cannot both claim the transition.
        """
        if owner is None:
            return False

        count = self.count_violations(owner)
        users = get_user_model().objects.filter(pk=owner.pk)

        newly_flagged = False
        if count >= self.threshold and not owner.violation_flagged:
            newly_flagged = users.filter(violation_flagged=False).update(
                violation_flagged=True, violation_count=count
            ) == 1

        if newly_flagged:
            logger.warning("User %s flagged with %s violations", owner.pk, count)
        else:
            users.update(violation_count=count)
            logger.info("User %s violation count recomputed to %s", owner.pk, count)

        owner.refresh_from_db(fields=["violation_count", "violation_flagged"])
        return newly_flagged
