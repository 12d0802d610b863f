from django.conf import settings
from django.core.management.base import BaseCommand

from authentication.models import CustomUser


class Command(BaseCommand):
    help = "Create the default admin account from the DEFAULT_ADMIN_* settings if it does not exist."

    def handle(self, *args, **options):
        email = settings.DEFAULT_ADMIN_EMAIL
        password = settings.DEFAULT_ADMIN_PASSWORD
        if not email or not password:
            self.stdout.write(self.style.WARNING("DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD not set, skipping"))
            return

        if CustomUser.objects.filter(email__iexact=email).exists():
            self.stdout.write(f"Admin {email} already exists")
            return

        CustomUser.objects.create_superuser(
            email=email,
            password=password,
            first_name=settings.DEFAULT_ADMIN_FIRST_NAME,
            last_name=settings.DEFAULT_ADMIN_LAST_NAME,
        )
        self.stdout.write(self.style.SUCCESS(f"Default admin {email} created"))
