# core/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password

from core.models import User
from core.services.permissions import seed_user_permissions

# username, role, position, unit
TEST_SET = [
    ("admin1", "admin", "Administrador", "Botafogo"),
    ("medico1", "staff", "Médico", "Botafogo"),
    ("enfermeira1", "staff", "Enfermeira", "Tijuca"),
    ("tecnico1", "staff", "Técnico de Enfermagem", "Tijuca"),
    ("comercial1", "staff", "Comercial", "Botafogo"),
]


class Command(BaseCommand):
    help = "Ensure test users exist and password=123456 (idempotent)."

    def handle(self, *args, **opts):
        for username, role, position, unit in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={
                    "role": role,
                    "position": position,
                    "unit": unit,
                    "password": make_password("123456"),
                    "is_active": True,
                },
            )
            if not created:
                u.password = make_password("123456")
                u.role = role
                u.position = position
                u.unit = unit
                u.is_active = True
                u.save(update_fields=["password", "role", "position", "unit", "is_active"])
                seed_user_permissions(u)
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role}, {position})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
