"""
User management endpoints (module ``users``).

Only administrators reach these views.  Module selections sent here are
stored through ``set_user_modules``; removals that would take dependent
modules down answer 409 until the caller repeats them with
``confirm=true``.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import User
from core.modules import get_registry, out_of_role, role_errors, validate_selection
from core.permissions import HasModule, IsAdminRole
from core.serializers.modules import ModuleSelectionSerializer, ModuleToggleSerializer
from core.serializers.users import UserCreateSerializer, UserUpdateSerializer
from core.services.accounts import create_user, delete_user, serialize_user, update_user
from core.services.permissions import (
    add_user_module,
    effective_modules,
    remove_user_module,
    set_user_modules,
)

USERS_ACCESS = [IsAuthenticated, IsAdminRole, HasModule('users')]


@api_view(['GET', 'POST'])
@permission_classes(USERS_ACCESS)
def users_list(request):
    if request.method == 'GET':
        qs = User.objects.order_by('first_name', 'username')
        role = request.query_params.get('role')
        if role:
            qs = qs.filter(role=role)
        return Response({'ok': True, 'data': [serialize_user(u) for u in qs]})
    s = UserCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = create_user(actor=request.user, **s.validated_data)
    return Response({'ok': True, 'data': serialize_user(user)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes(USERS_ACCESS)
def user_detail(request, pk: int):
    user = get_object_or_404(User, pk=pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_user(user)})
    if request.method == 'PUT':
        s = UserUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        update_user(user, actor=request.user, data=s.validated_data)
        return Response({'ok': True, 'data': serialize_user(user)})
    if user.pk == request.user.pk:
        return Response({'ok': False, 'error': {'code': 'forbidden', 'message': 'Não é possível excluir a si mesmo'}},
                        status=status.HTTP_400_BAD_REQUEST)
    delete_user(user, actor=request.user)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'PUT'])
@permission_classes(USERS_ACCESS)
def user_modules(request, pk: int):
    """Read or replace a user's module selection.

    PUT stores ``auto_fix`` of the selection and reports which modules were
    added to satisfy dependencies.  Modules above the user's role are
    refused unless a selected module of its level depends on them.
    """
    user = get_object_or_404(User, pk=pk)
    registry = get_registry()
    if request.method == 'GET':
        enabled = effective_modules(user)
        return Response({'ok': True, 'data': {
            'modules': registry.ordered(enabled),
            'check': validate_selection(enabled).as_dict(),
        }})
    s = ModuleSelectionSerializer(data=request.data, context={'strict': True, 'role': user.role})
    s.is_valid(raise_exception=True)
    requested = frozenset(s.validated_data['modules'])
    stored = set_user_modules(user, requested, actor=request.user)
    return Response({'ok': True, 'data': {
        'modules': registry.ordered(stored),
        'added': registry.ordered(stored - requested),
    }})


@api_view(['POST'])
@permission_classes(USERS_ACCESS)
def user_module_add(request, pk: int):
    user = get_object_or_404(User, pk=pk)
    s = ModuleToggleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    module_id = s.validated_data['moduleId']

    def within_role(current):
        if module_id in out_of_role(current | {module_id}, user.role):
            raise ValidationError({'moduleId': role_errors([module_id], user.role)})

    stored, current = add_user_module(user, module_id, actor=request.user, check=within_role)
    registry = get_registry()
    return Response({'ok': True, 'data': {
        'modules': registry.ordered(stored),
        'added': registry.ordered(stored - current),
    }})


@api_view(['POST'])
@permission_classes(USERS_ACCESS)
def user_module_remove(request, pk: int):
    user = get_object_or_404(User, pk=pk)
    s = ModuleToggleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    plan = remove_user_module(
        user, s.validated_data['moduleId'],
        confirm=s.validated_data['confirm'], actor=request.user,
    )
    return Response({'ok': True, 'data': {
        **plan.as_dict(),
        'modules': get_registry().ordered(effective_modules(user)),
    }})


@api_view(['POST'])
@permission_classes(USERS_ACCESS)
def user_modules_validate(request, pk: int):
    """Dry run: validate a proposed selection for this user without saving it."""
    get_object_or_404(User, pk=pk)
    s = ModuleSelectionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response({'ok': True, 'data': validate_selection(s.validated_data['modules']).as_dict()})
