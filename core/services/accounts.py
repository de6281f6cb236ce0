"""
Back-office account management.

An account is created with the module set the administrator picked.  The
selection is validated first; an invalid one is rejected with the joined
warnings instead of being silently repaired, and what gets stored is the
auto-fixed set.  Modules above the new account's role are refused.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.db import transaction
from rest_framework.exceptions import ValidationError

from core.models import User
from core.modules import role_errors, validate_selection
from core.services.audit import log_action
from core.services.permissions import effective_modules, set_user_modules

logger = logging.getLogger(__name__)


def serialize_user(user: User) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'name': user.get_full_name() or user.username,
        'email': user.email,
        'role': user.role,
        'position': user.position,
        'unit': user.unit,
        'type': user.type,
        'isActive': user.is_active,
        'modules': sorted(effective_modules(user)),
    }


def _split_name(name: str) -> tuple[str, str]:
    first, _, last = (name or '').strip().partition(' ')
    return first, last.strip()


@transaction.atomic
def create_user(*, actor: User, username: str, password: str, name: str, role: str = 'staff',
                email: str = '', position: str = '', unit: str = '', type: str = 'matriz',
                modules: Optional[Iterable[str]] = None) -> User:
    if modules is not None:
        modules = list(modules)
        check = validate_selection(modules)
        if not check.is_valid:
            raise ValidationError({'modules': list(check.warnings)})
        errors = role_errors(modules, role)
        if errors:
            raise ValidationError({'modules': errors})

    first, last = _split_name(name)
    user = User.objects.create_user(
        username=username, password=password, email=email or '',
        first_name=first, last_name=last,
        role=role, position=position or '', unit=unit or '', type=type or 'matriz',
    )
    if modules is not None:
        set_user_modules(user, modules, actor=actor)
    log_action(user=actor, action='user_create', object_type='user', object_id=user.id,
               detail={'username': username, 'role': role})
    logger.info('user %s created by %s', user.pk, actor.pk)
    return user


def update_user(user: User, *, actor: User, data: dict) -> User:
    fields = []
    if 'name' in data:
        user.first_name, user.last_name = _split_name(data['name'])
        fields += ['first_name', 'last_name']
    for key, attr in (('email', 'email'), ('role', 'role'), ('position', 'position'),
                      ('unit', 'unit'), ('type', 'type'), ('isActive', 'is_active')):
        if key in data:
            setattr(user, attr, data[key])
            fields.append(attr)
    if fields:
        user.save(update_fields=fields)
        log_action(user=actor, action='user_update', object_type='user', object_id=user.id,
                   detail={'fields': fields})
    return user


def delete_user(user: User, *, actor: User) -> None:
    uid = user.id
    user.delete()
    log_action(user=actor, action='user_delete', object_type='user', object_id=uid)
    logger.info('user %s deleted by %s', uid, actor.pk)
