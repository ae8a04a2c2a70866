from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from sightings.models import User
from sightings.services.violations import ViolationAccountant


class Command(BaseCommand):
    """
    Management command to recompute every user's violation count.

    Runs the same recount the moderation workflow uses after each hide or
    delete, so counts drifted by manual report edits are brought back in line
    with the reports table. Users crossing the threshold are flagged; flags
    are never cleared.
    """

    help = 'Recomputes violation counts from resolved reports and flags repeat offenders'

    def add_arguments(self, parser):
        """Allow limiting the recount to specific users."""
        parser.add_argument(
            "--user",
            action="append",
            dest="users",
            default=[],
            help="Username to recount (repeatable). Defaults to every user.",
        )

    def handle(self, *args, **options):
        """Recount each selected user inside its own transaction."""
        users = User.objects.order_by("username")
        if options["users"]:
            users = users.filter(username__in=options["users"])
            missing = set(options["users"]) - set(users.values_list("username", flat=True))
            if missing:
                raise CommandError(f"Unknown user(s): {', '.join(sorted(missing))}")

        accountant = ViolationAccountant()
        updated = flagged = 0
        for user in users.iterator():
            before = user.violation_count
            with transaction.atomic():
                newly_flagged = accountant.recount_and_maybe_flag(user)
            if user.violation_count != before:
                updated += 1
            if newly_flagged:
                flagged += 1
                self.stdout.write(f"Flagged {user.username} ({user.violation_count} violations)")

        self.stdout.write(self.style.SUCCESS(f"Recounted violations: {updated} updated, {flagged} newly flagged."))
