from django.test import TestCase, override_settings

from sightings.models import User
from sightings.services.violations import ViolationAccountant
from sightings.tests.helpers import (
    make_admin,
    make_comment,
    make_photo,
    make_report,
    make_resolved_report,
    make_user,
)


class ViolationAccountantTests(TestCase):
    def setUp(self):
        self.owner = make_user()
        self.admin = make_admin()
        self.accountant = ViolationAccountant(threshold=3)

    def _resolved_against(self, count, owner=None):
        owner = owner or self.owner
        for _ in range(count):
            make_resolved_report(make_photo(user=owner), admin=self.admin)

    def test_counts_resolved_reports_on_photos_and_comments(self):
        photo = make_photo(user=self.owner)
        comment = make_comment(user=self.owner, photo=make_photo())
        make_resolved_report(photo, admin=self.admin)
        make_resolved_report(comment, admin=self.admin)
        make_report(photo)
        make_report(comment, status="dismissed", resolved_by=self.admin)
        make_resolved_report(make_photo(), admin=self.admin)

        self.assertEqual(self.accountant.count_violations(self.owner), 2)

    def test_below_threshold_updates_count_only(self):
        self._resolved_against(2)

        flagged = self.accountant.recount_and_maybe_flag(self.owner)

        self.assertFalse(flagged)
        self.owner.refresh_from_db()
        self.assertEqual(self.owner.violation_count, 2)
        self.assertFalse(self.owner.violation_flagged)

    def test_reaching_threshold_flags_once(self):
        self._resolved_against(3)

        self.assertTrue(self.accountant.recount_and_maybe_flag(self.owner))
        self.assertEqual(self.owner.violation_count, 3)
        self.assertTrue(self.owner.violation_flagged)

        # second recount with nothing new
        self.assertFalse(self.accountant.recount_and_maybe_flag(self.owner))
        self.assertEqual(self.owner.violation_count, 3)
        self.assertTrue(self.owner.violation_flagged)

    def test_already_flagged_owner_gets_count_update_without_new_flag(self):
        User.objects.filter(pk=self.owner.pk).update(violation_flagged=True, violation_count=5)
        self.owner.refresh_from_db()
        self._resolved_against(6)

        flagged = self.accountant.recount_and_maybe_flag(self.owner)

        self.assertFalse(flagged)
        self.owner.refresh_from_db()
        self.assertEqual(self.owner.violation_count, 6)
        self.assertTrue(self.owner.violation_flagged)

    def test_flag_is_never_cleared(self):
        User.objects.filter(pk=self.owner.pk).update(violation_flagged=True, violation_count=4)
        self.owner.refresh_from_db()

        self.accountant.recount_and_maybe_flag(self.owner)

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.violation_count, 0)
        self.assertTrue(self.owner.violation_flagged)

    def test_stale_instance_cannot_flag_twice(self):
        self._resolved_against(3)
        stale = User.objects.get(pk=self.owner.pk)

        self.assertTrue(self.accountant.recount_and_maybe_flag(self.owner))
        self.assertFalse(self.accountant.recount_and_maybe_flag(stale))

    def test_none_owner_is_skipped(self):
        self.assertFalse(self.accountant.recount_and_maybe_flag(None))
        self.assertEqual(self.accountant.count_violations(None), 0)

    @override_settings(MODERATION_VIOLATION_THRESHOLD=1)
    def test_threshold_comes_from_settings(self):
        accountant = ViolationAccountant()
        self._resolved_against(1)

        self.assertEqual(accountant.threshold, 1)
        self.assertTrue(accountant.recount_and_maybe_flag(self.owner))
