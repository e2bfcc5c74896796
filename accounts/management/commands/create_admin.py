import os

from django.core.management.base import BaseCommand, CommandError

from accounts.models import User


class Command(BaseCommand):
    help = "Create an admin account, or promote an existing account to admin."

    def add_arguments(self, parser):
        parser.add_argument("--username", default="admin", help="Admin username (default: admin)")
        parser.add_argument(
            "--password",
            default=None,
            help="Password for a new account (default: $ADMIN_PASSWORD)",
        )

    def handle(self, *args, **options):
        username = options["username"].strip()
        if not username:
            raise CommandError("--username must not be empty.")

        user = User.objects.filter(username=username).first()
        if user is not None:
            User.objects.filter(pk=user.pk).update(is_admin=True, has_post_access=True)
            self.stdout.write(self.style.SUCCESS(f"Promoted existing user {username} to admin."))
            return

        password = options["password"] or os.environ.get("ADMIN_PASSWORD")
        if not password:
            raise CommandError("Provide --password or set ADMIN_PASSWORD for a new admin account.")

        user = User.objects.create_superuser(username, password)
        self.stdout.write(self.style.SUCCESS(f"Admin user created: {user.username} (id={user.id})"))
