from django.core.management.base import BaseCommand

from core.models import User, UserPermission
from core.services.permissions import seed_user_permissions


class Command(BaseCommand):
    help = "Give every user without a stored module selection the defaults of its role (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only list the users that would be seeded.")

    def handle(self, *args, **opts):
        seeded = set(UserPermission.objects.values_list("user_id", flat=True))
        missing = User.objects.exclude(pk__in=seeded).order_by("pk")
        count = 0
        for user in missing:
            if not opts["dry_run"]:
                seed_user_permissions(user)
            count += 1
            self.stdout.write(f"{user.username} ({user.role})")
        verb = "would seed" if opts["dry_run"] else "seeded"
        self.stdout.write(self.style.SUCCESS(f"{verb} {count} user(s)"))
