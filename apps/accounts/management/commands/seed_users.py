"""
manage.py seed_users – create the default admin and read-only accounts.
"""
import structlog
from django.core.management.base import BaseCommand

from apps.accounts.models import Role, User

logger = structlog.get_logger(__name__)

DEFAULT_USERS = [
    {"username": "admin", "password": "admin123", "email": "admin@example.com", "role": Role.ADMIN},
    {"username": "user", "password": "user123", "email": "user@example.com", "role": Role.READ_ONLY},
]


class Command(BaseCommand):
    help = "Create the default admin/admin123 and user/user123 accounts if missing"

    def handle(self, *args, **options):
        created = 0
        for entry in DEFAULT_USERS:
            if User.objects.filter(username=entry["username"]).exists():
                self.stdout.write(f"User {entry['username']} already exists")
                continue
            user = User(username=entry["username"], email=entry["email"], role=entry["role"])
            user.set_password(entry["password"])
            user.save()
            created += 1
            logger.info("default_user_created", username=user.username, role=user.role)

        self.stdout.write(self.style.SUCCESS(f"Created {created} default user(s)"))
