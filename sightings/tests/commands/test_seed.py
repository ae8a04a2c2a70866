from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from sightings.models import Comment, Photo, Report, User


class SeedCommandTests(TestCase):
    def test_seeds_users_content_and_pending_reports(self):
        out = StringIO()
        call_command("seed", "--users", "4", stdout=out)

        self.assertTrue(User.objects.filter(username="admin", role=User.ROLE_ADMIN).exists())
        self.assertEqual(User.objects.filter(role=User.ROLE_USER).count(), 4)
        self.assertEqual(Photo.objects.count(), 8)
        self.assertEqual(Comment.objects.count(), 16)
        self.assertEqual(Report.objects.pending().count(), Report.objects.count())
        # every photo (8) plus ten of the sixteen comments
        self.assertEqual(Report.objects.count(), 18)
        self.assertIn("Seeded admin", out.getvalue())

    def test_reporters_never_report_their_own_content(self):
        call_command("seed", "--users", "3", stdout=StringIO())

        for report in Report.objects.all():
            self.assertNotEqual(report.reportable.user_id, report.reporter_id)
