import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'A Casa'

    def ready(self):
        # A broken module table must stop the process here
        from .modules.registry import get_registry
        registry = get_registry()
        logger.debug('module registry loaded with %d modules', len(registry))

        from . import signals  # noqa: F401
