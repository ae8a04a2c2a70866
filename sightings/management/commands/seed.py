"""Management command to seed the database with sample users, photos, comments and reports."""

from random import choice, randint, sample

from faker import Faker
from django.core.management.base import BaseCommand
from django.db import transaction

from sightings.models import Comment, Photo, Report, User


class Command(BaseCommand):
    """Seed demo data for exercising the moderation queue."""
    USER_COUNT = 20
    DEFAULT_PASSWORD = 'Password123'
    REPORT_REASONS = [
        "Spam",
        "Not a rainbow",
        "Inappropriate content",
        "Harassment in comments",
        "Copyright violation",
    ]
    help = 'Seeds the database with sample data'

    def __init__(self, *args, **kwargs):
        """Set up faker instance for generating seed content."""
        super().__init__(*args, **kwargs)
        self.faker = Faker('en_GB')

    def add_arguments(self, parser):
        parser.add_argument("--users", type=int, default=self.USER_COUNT, help="Number of regular users to create.")

    @transaction.atomic
    def handle(self, *args, **options):
        """Run the full seeding sequence."""
        admin = self.create_admin()
        users = self.create_users(options["users"])
        photos = self.create_photos(users, per_user=2)
        comments = self.create_comments(users, photos, per_photo=2)
        reports = self.create_reports(users, photos, comments)
        self.stdout.write(self.style.SUCCESS(
            f"Seeded admin '{admin.username}', {len(users)} users, {len(photos)} photos, "
            f"{len(comments)} comments and {len(reports)} pending reports."
        ))

    def create_admin(self):
        admin, created = User.objects.get_or_create(
            username="admin",
            defaults={"email": "admin@example.org", "role": User.ROLE_ADMIN, "is_staff": True, "is_superuser": True},
        )
        if created:
            admin.set_password(self.DEFAULT_PASSWORD)
            admin.save()
        return admin

    def create_users(self, count):
        users = []
        for _ in range(count):
            username = self.faker.unique.user_name()
            users.append(User.objects.create_user(
                username=username,
                email=f"{username}@example.org",
                password=self.DEFAULT_PASSWORD,
                display_name=self.faker.first_name(),
            ))
        return users

    def create_photos(self, users, per_user):
        return [
            Photo.objects.create(
                user=user,
                title=self.faker.sentence(nb_words=4).rstrip("."),
                description=self.faker.paragraph(nb_sentences=2),
                image_url=self.faker.image_url(),
            )
            for user in users
            for _ in range(per_user)
        ]

    def create_comments(self, users, photos, per_photo):
        return [
            Comment.objects.create(photo=photo, user=choice(users), content=self.faker.sentence())
            for photo in photos
            for _ in range(per_photo)
        ]

    def create_reports(self, users, photos, comments):
        reports = []
        targets = sample(photos, k=min(len(photos), 10)) + sample(comments, k=min(len(comments), 10))
        for content in targets:
            reporter = choice([user for user in users if user.pk != content.user_id] or users)
            reports.append(Report.objects.create(
                reporter=reporter,
                reportable_type=type(content).__name__,
                reportable_id=content.pk,
                reason=f"{choice(self.REPORT_REASONS)} ({randint(1, 99)})",
            ))
        return reports
