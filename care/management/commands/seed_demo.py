# care/management/commands/seed_demo.py
from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password

from care.models import User

# username, role, display name, latitude, longitude, hospital code
DEMO_SET = [
    ("admin1", User.ROLE_ADMIN, "Administrator", None, None, None),
    ("patient1", User.ROLE_PATIENT, "", 28.6139, 77.2090, None),
    ("aiims@example.org", User.ROLE_HOSPITAL, "AIIMS New Delhi", 28.5672, 77.2100, "HSP-100001"),
    ("safdarjung@example.org", User.ROLE_HOSPITAL, "Safdarjung Hospital", 28.5683, 77.2058, "HSP-100002"),
]


class Command(BaseCommand):
    help = "Ensure demo accounts exist with password=123456 (idempotent). Hospitals are created approved."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="123456")

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for username, role, name, lat, lng, code in DEMO_SET:
            fields = {
                "role": role,
                "password": password,
                "is_active": True,
                "display_name": name,
                "latitude": lat,
                "longitude": lng,
            }
            if role == User.ROLE_HOSPITAL:
                fields.update(email=username, status=User.STATUS_APPROVED, hospital_code=code)
            User.objects.update_or_create(username=username, defaults=fields)
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All demo accounts ensured."))
