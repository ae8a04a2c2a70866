from django.contrib.admin.sites import AdminSite
from django.contrib.messages import get_messages
from django.contrib.messages.storage.fallback import FallbackStorage
from django.contrib.sessions.middleware import SessionMiddleware
from django.test import RequestFactory, TestCase

from sightings.admin import PhotoAdmin, ReportAdmin
from sightings.models import Photo, Report
from sightings.tests.helpers import make_admin, make_comment, make_photo, make_report, make_resolved_report, make_user


def add_session_and_messages(request):
    """Attach session and messages storage to a RequestFactory request."""
    middleware = SessionMiddleware(lambda r: None)
    middleware.process_request(request)
    request.session.save()
    request._messages = FallbackStorage(request)
    return request


class ReportAdminTests(TestCase):
    def setUp(self):
        self.site = AdminSite()
        self.report_admin = ReportAdmin(Report, self.site)
        self.admin = make_admin(is_staff=True, is_superuser=True)
        self.owner = make_user()
        self.photo = make_photo(user=self.owner, title="Bay arc")
        request = RequestFactory().post("/admin/sightings/report/")
        request.user = self.admin
        self.request = add_session_and_messages(request)

    def _messages(self):
        return [str(m) for m in get_messages(self.request)]

    def test_hide_action_goes_through_moderation(self):
        report = make_report(self.photo)

        with self.captureOnCommitCallbacks(execute=True):
            self.report_admin.hide_content(self.request, Report.objects.filter(pk=report.pk))

        report.refresh_from_db()
        self.photo.refresh_from_db()
        self.assertEqual(report.status, Report.STATUS_RESOLVED)
        self.assertEqual(report.resolved_by, self.admin)
        self.assertEqual(self.photo.moderation_status, Photo.MODERATION_HIDDEN)
        self.owner.refresh_from_db()
        self.assertEqual(self.owner.violation_count, 1)
        self.assertIn("1 report(s) processed with 'hide'.", self._messages())

    def test_approve_action_counts_failures(self):
        pending = make_report(self.photo)
        reviewed = make_resolved_report(self.photo, admin=self.admin)

        self.report_admin.approve_reports(self.request, Report.objects.filter(pk__in=[pending.pk, reviewed.pk]))

        pending.refresh_from_db()
        self.assertEqual(pending.status, Report.STATUS_DISMISSED)
        messages = self._messages()
        self.assertIn("1 report(s) processed with 'approve'.", messages)
        self.assertIn("1 report(s) could not be processed.", messages)

    def test_delete_comment_action(self):
        comment = make_comment(user=self.owner, photo=self.photo)
        report = make_report(comment)

        self.report_admin.delete_content(self.request, Report.objects.filter(pk=report.pk))

        comment.refresh_from_db()
        self.assertIsNotNone(comment.deleted_at)

    def test_reports_cannot_be_deleted(self):
        self.assertFalse(self.report_admin.has_delete_permission(self.request))

    def test_target_object_links_to_content(self):
        report = make_report(self.photo)
        html = self.report_admin.target_object(report)
        self.assertIn(f"/admin/sightings/photo/{self.photo.pk}/change/", html)
        self.assertIn("Photo: Bay arc", html)

    def test_target_object_for_missing_content(self):
        report = make_report(self.photo)
        Photo.objects.filter(pk=self.photo.pk).delete()
        self.assertEqual(self.report_admin.target_object(report), "Deleted Content")


class PhotoAdminTests(TestCase):
    def test_report_count_display(self):
        photo_admin = PhotoAdmin(Photo, AdminSite())
        photo = make_photo()
        self.assertEqual(photo_admin.report_count_display(photo), "0")

        make_report(photo)
        make_report(photo)
        self.assertIn("2 Reports", photo_admin.report_count_display(photo))
