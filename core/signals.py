from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def seed_permissions_for_new_user(sender, instance, created, raw=False, **kwargs):
    """New accounts start with the module set of their role."""
    if not created or raw:
        return
    from core.services.permissions import seed_user_permissions
    seed_user_permissions(instance)
