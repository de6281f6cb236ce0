"""
Custom permission classes for role and module based access control.
"""
from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow access only to users with the administrative role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) == "admin")


class HasModule(BasePermission):
    """Allow access when ``module_id`` is enabled for the requesting user
    and its ``min_role`` is within the user's role.

    Used as ``@permission_classes([IsAuthenticated, HasModule('guests')])``;
    DRF instantiates permission classes by calling them, so an instance
    returns itself when called.
    """
    message = 'Módulo não habilitado para este usuário.'

    def __init__(self, module_id: str | None = None):
        self.module_id = module_id

    def __call__(self):
        return self

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        module_id = self.module_id or getattr(view, "module_id", None)
        if not module_id:
            return False
        from core.services.permissions import accessible_modules
        return module_id in accessible_modules(user)
