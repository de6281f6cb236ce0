"""
Per-user module permissions.

Stored selections are always the output of ``auto_fix`` so every persisted
record satisfies the dependency rules; nothing here edits
``enabled_modules`` field by field.  Changes that start from the current
selection (adding or removing one module) read it under the same row lock
they write with.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from django.db import transaction

from core.exceptions import RemovalNeedsConfirmation
from core.models import User, UserPermission
from core.modules import (
    ModuleRegistry,
    RemovalPlan,
    auto_fix,
    default_modules_for_role,
    get_registry,
    plan_addition,
    plan_removal,
)
from core.services.audit import log_action

logger = logging.getLogger(__name__)


def _registry(registry: Optional[ModuleRegistry]) -> ModuleRegistry:
    return registry if registry is not None else get_registry()


def effective_modules(user: User, *, registry: Optional[ModuleRegistry] = None) -> frozenset[str]:
    """Stored selection of ``user``, or the defaults of its role when none is stored."""
    record = UserPermission.objects.filter(user_id=user.pk).only('enabled_modules').first()
    if record is not None:
        return frozenset(record.enabled_modules or [])
    return default_modules_for_role(user.role, registry=_registry(registry))


def accessible_modules(user: User, *, registry: Optional[ModuleRegistry] = None) -> frozenset[str]:
    """Enabled modules whose ``min_role`` the user's role reaches.

    A staff account keeps ``guests`` stored when ``prontuario`` pulled it
    in, but the guest registry itself stays closed to it.
    """
    registry = _registry(registry)
    return frozenset(
        mid for mid in effective_modules(user, registry=registry)
        if mid in registry and registry[mid].visible_for(user.role)
    )


def seed_user_permissions(user: User, *, registry: Optional[ModuleRegistry] = None) -> UserPermission:
    modules = default_modules_for_role(user.role, registry=_registry(registry))
    record, created = UserPermission.objects.get_or_create(
        user=user, defaults={'enabled_modules': _registry(registry).ordered(modules)}
    )
    if created:
        logger.info('seeded %d modules for user %s (%s)', len(modules), user.pk, user.role)
    return record


def _locked_record(user: User, registry: ModuleRegistry) -> UserPermission:
    record, _ = UserPermission.objects.select_for_update().get_or_create(
        user=user,
        defaults={'enabled_modules': registry.ordered(default_modules_for_role(user.role, registry=registry))},
    )
    return record


def _store(
    user: User,
    record: UserPermission,
    requested: frozenset[str],
    *,
    actor: Optional[User],
    registry: ModuleRegistry,
) -> frozenset[str]:
    fixed = auto_fix(requested, registry=registry)
    before = sorted(record.enabled_modules or [])
    record.enabled_modules = registry.ordered(fixed)
    record.updated_by = actor if actor is not None and actor.pk else None
    record.save(update_fields=['enabled_modules', 'updated_by', 'updated_at'])
    added = sorted(fixed - requested)
    log_action(
        user=actor, action='permissions_update', object_type='user', object_id=user.pk,
        detail={'before': before, 'after': sorted(fixed), 'autoAdded': added},
    )
    logger.info('modules for user %s set by %s (%d enabled, auto-added %s)',
                user.pk, getattr(actor, 'pk', None), len(fixed), added)
    return fixed


@transaction.atomic
def set_user_modules(
    user: User,
    module_ids: Iterable[str],
    *,
    actor: Optional[User] = None,
    registry: Optional[ModuleRegistry] = None,
) -> frozenset[str]:
    """Persist ``auto_fix(module_ids)`` for ``user`` and return it."""
    registry = _registry(registry)
    record = _locked_record(user, registry)
    return _store(user, record, frozenset(module_ids), actor=actor, registry=registry)


@transaction.atomic
def add_user_module(
    user: User,
    module_id: str,
    *,
    actor: Optional[User] = None,
    registry: Optional[ModuleRegistry] = None,
    check: Optional[Callable[[frozenset[str]], None]] = None,
) -> tuple[frozenset[str], frozenset[str]]:
    """Switch ``module_id`` on with its dependencies.

    Returns ``(stored, before)``.  ``check`` receives the locked current
    selection and may raise to refuse the change.
    """
    registry = _registry(registry)
    record = _locked_record(user, registry)
    current = frozenset(record.enabled_modules or [])
    if check is not None:
        check(current)
    stored = _store(user, record, plan_addition(current, module_id, registry=registry),
                    actor=actor, registry=registry)
    return stored, current


@transaction.atomic
def remove_user_module(
    user: User,
    module_id: str,
    *,
    confirm: bool = False,
    actor: Optional[User] = None,
    registry: Optional[ModuleRegistry] = None,
) -> RemovalPlan:
    """Switch ``module_id`` off for ``user`` together with its dependents.

    When other enabled modules depend on it the removal only happens with
    ``confirm=True``; otherwise :class:`RemovalNeedsConfirmation` carries
    the plan back to the caller.
    """
    registry = _registry(registry)
    record = _locked_record(user, registry)
    plan = plan_removal(frozenset(record.enabled_modules or []), module_id, registry=registry)
    if plan.requires_confirmation and not confirm:
        raise RemovalNeedsConfirmation(plan)
    _store(user, record, plan.remaining, actor=actor, registry=registry)
    return plan


def navigation_for(user: User, *, registry: Optional[ModuleRegistry] = None) -> list:
    """Registry entries, in table order, that ``user`` gets in the menu."""
    registry = _registry(registry)
    enabled = accessible_modules(user, registry=registry)
    return [m for m in registry.all() if m.id in enabled]
