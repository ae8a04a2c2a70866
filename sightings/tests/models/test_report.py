from datetime import timedelta

from django.core.exceptions import ValidationError
from django.db.models import ProtectedError
from django.test import TestCase
from django.utils import timezone

from sightings.errors import ReportAlreadyReviewed
from sightings.models import Report, User
from sightings.services.violations import ViolationAccountant
from sightings.tests.helpers import (
    make_admin,
    make_comment,
    make_photo,
    make_report,
    make_resolved_report,
    make_user,
)


class ReportModelTests(TestCase):
    def setUp(self):
        self.reporter = make_user(username="reporter")
        self.owner = make_user(username="owner")
        self.admin = make_admin(username="moderator")
        self.photo = make_photo(user=self.owner, title="Hello")

    def test_str_mentions_type_and_reporter(self):
        report = make_report(self.photo, reporter=self.reporter)
        self.assertEqual(str(report), "Report on Photo by reporter")

    def test_new_report_is_pending_and_unreviewed(self):
        report = make_report(self.photo, reporter=self.reporter)
        self.assertEqual(report.status, Report.STATUS_PENDING)
        self.assertFalse(report.is_reviewed)
        self.assertIsNone(report.resolved_by)
        self.assertIsNone(report.admin_note)

    def test_ordering_newest_first(self):
        older = make_report(self.photo, reporter=self.reporter)
        newer = make_report(self.photo, reporter=self.reporter)
        Report.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))

        self.assertEqual([r.pk for r in Report.objects.all()], [newer.pk, older.pk])

    def test_reportable_resolves_photo_and_comment(self):
        comment = make_comment(user=self.owner, photo=self.photo)
        photo_report = make_report(self.photo, reporter=self.reporter)
        comment_report = make_report(comment, reporter=self.reporter)

        self.assertEqual(photo_report.reportable, self.photo)
        self.assertEqual(comment_report.reportable, comment)

    def test_reportable_is_none_when_content_is_gone(self):
        report = make_report(self.photo, reporter=self.reporter)
        self.photo.delete()
        report.refresh_from_db()
        self.assertIsNone(report.reportable)

    def test_resolve_sets_status_reviewer_and_note(self):
        report = make_report(self.photo, reporter=self.reporter)
        report.resolve(self.admin, note="inappropriate")

        report.refresh_from_db()
        self.assertEqual(report.status, Report.STATUS_RESOLVED)
        self.assertEqual(report.resolved_by, self.admin)
        self.assertEqual(report.admin_note, "inappropriate")
        self.assertTrue(report.is_reviewed)
        self.assertEqual(report.resolver_name, str(self.admin))

    def test_dismiss_sets_status_and_reviewer(self):
        report = make_report(self.photo, reporter=self.reporter)
        report.dismiss(self.admin)

        report.refresh_from_db()
        self.assertEqual(report.status, Report.STATUS_DISMISSED)
        self.assertEqual(report.resolved_by, self.admin)
        self.assertIsNone(report.admin_note)

    def test_terminal_state_cannot_transition_again(self):
        report = make_report(self.photo, reporter=self.reporter)
        report.dismiss(self.admin)

        with self.assertRaises(ReportAlreadyReviewed):
            report.resolve(self.admin)
        report.refresh_from_db()
        self.assertEqual(report.status, Report.STATUS_DISMISSED)

    def test_stale_instance_cannot_overwrite_review(self):
        report = make_report(self.photo, reporter=self.reporter)
        stale = Report.objects.get(pk=report.pk)
        report.resolve(self.admin)

        with self.assertRaises(ReportAlreadyReviewed):
            stale.dismiss(make_admin())
        stale.refresh_from_db()
        self.assertEqual(stale.status, Report.STATUS_RESOLVED)
        self.assertEqual(stale.resolved_by, self.admin)

    def test_transition_requires_admin(self):
        report = make_report(self.photo, reporter=self.reporter)
        with self.assertRaises(ValidationError):
            report.resolve(None)
        report.refresh_from_db()
        self.assertEqual(report.status, Report.STATUS_PENDING)

    def test_note_over_limit_is_rejected_before_writing(self):
        report = make_report(self.photo, reporter=self.reporter)
        with self.assertRaises(ValidationError) as ctx:
            report.resolve(self.admin, note="x" * 2001)
        self.assertIn("admin_note", ctx.exception.message_dict)
        report.refresh_from_db()
        self.assertEqual(report.status, Report.STATUS_PENDING)

    def test_reference_cannot_change_after_creation(self):
        report = make_report(self.photo, reporter=self.reporter)
        loaded = Report.objects.get(pk=report.pk)
        loaded.reportable_id = make_photo(user=self.owner).pk

        with self.assertRaises(ValidationError):
            loaded.save()

    def test_other_fields_can_still_be_saved(self):
        report = make_report(self.photo, reporter=self.reporter)
        loaded = Report.objects.get(pk=report.pk)
        loaded.reason = "Updated reason"
        loaded.save()

        self.assertEqual(Report.objects.get(pk=report.pk).reason, "Updated reason")

    def test_filed_by(self):
        report = make_report(self.photo, reporter=self.reporter)
        self.assertTrue(report.filed_by(self.reporter))
        self.assertFalse(report.filed_by(self.owner))
        self.assertFalse(report.filed_by(None))

    def test_deleting_reviewer_is_blocked_and_review_kept(self):
        report = make_report(self.photo, reporter=self.reporter)
        report.resolve(self.admin)

        with self.assertRaises(ProtectedError):
            User.objects.filter(pk=self.admin.pk).delete()

        report.refresh_from_db()
        self.assertEqual(report.status, Report.STATUS_RESOLVED)
        self.assertEqual(report.resolved_by, self.admin)

    def test_deleting_reporter_keeps_reports_and_violations(self):
        reporters = [make_user() for _ in range(3)]
        for reporter in reporters:
            make_resolved_report(make_photo(user=self.owner), reporter=reporter, admin=self.admin)
        accountant = ViolationAccountant(threshold=3)
        self.assertEqual(accountant.count_violations(self.owner), 3)

        with self.assertRaises(ProtectedError):
            reporters[0].delete()

        self.assertEqual(Report.objects.filter(reporter=reporters[0]).count(), 1)
        self.assertEqual(accountant.count_violations(self.owner), 3)


class ReportQuerySetTests(TestCase):
    def setUp(self):
        self.owner = make_user()
        self.admin = make_admin()
        self.photo = make_photo(user=self.owner)
        self.comment = make_comment(user=self.owner, photo=self.photo)

    def test_status_scopes(self):
        pending = make_report(self.photo)
        resolved = make_report(self.photo, status=Report.STATUS_RESOLVED, resolved_by=self.admin)
        dismissed = make_report(self.comment, status=Report.STATUS_DISMISSED, resolved_by=self.admin)

        self.assertEqual(list(Report.objects.pending()), [pending])
        self.assertEqual(list(Report.objects.resolved()), [resolved])
        self.assertEqual(list(Report.objects.dismissed()), [dismissed])

    def test_type_scopes_and_for_content(self):
        photo_report = make_report(self.photo)
        comment_report = make_report(self.comment)

        self.assertEqual(list(Report.objects.photo_reports()), [photo_report])
        self.assertEqual(list(Report.objects.comment_reports()), [comment_report])
        self.assertEqual(list(Report.objects.for_content(self.comment)), [comment_report])
