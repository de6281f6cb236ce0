from django.core.exceptions import ImproperlyConfigured
from django.core.management.base import BaseCommand, CommandError

from core.modules import SYSTEM_MODULES, build_registry


class Command(BaseCommand):
    help = "Validate the module table and print its dependency graph."

    def handle(self, *args, **opts):
        try:
            registry = build_registry(SYSTEM_MODULES)
        except ImproperlyConfigured as exc:
            raise CommandError(str(exc)) from exc

        for module in registry.all():
            flags = []
            if module.is_required:
                flags.append("required")
            if module.min_role != "staff":
                flags.append(f"min_role={module.min_role}")
            suffix = f" [{', '.join(flags)}]" if flags else ""
            self.stdout.write(f"{module.id} ({module.category}){suffix}")
            if module.dependencies:
                self.stdout.write(f"  depends on: {', '.join(registry.ordered(module.dependencies))}")
            if module.required_by:
                self.stdout.write(f"  required by: {', '.join(registry.ordered(module.required_by))}")
        self.stdout.write(self.style.SUCCESS(f"{len(registry)} modules, no cycles"))
