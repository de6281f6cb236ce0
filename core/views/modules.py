"""
Module catalogue endpoints.

The catalogue itself and the validate/auto-fix helpers are readable by any
authenticated user so that the permission matrix can be rendered and
checked on every toggle; nothing here stores anything.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.modules import (
    CATEGORIES,
    auto_fix,
    default_modules_for_role,
    get_registry,
    select_all_for_role,
    select_required,
    validate_selection,
)
from core.serializers.modules import ModuleSelectionSerializer
from core.services.permissions import effective_modules, navigation_for


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def module_catalogue(request):
    registry = get_registry()
    return Response({
        'ok': True,
        'data': [m.as_dict() for m in registry.all()],
        'categories': {c: [m.id for m in registry.by_category(c)] for c in CATEGORIES},
        'required': registry.ordered(registry.required_ids()),
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def module_validate(request):
    s = ModuleSelectionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    check = validate_selection(s.validated_data['modules'])
    return Response({'ok': True, 'data': check.as_dict()})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def module_auto_fix(request):
    s = ModuleSelectionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    requested = frozenset(s.validated_data['modules'])
    fixed = auto_fix(requested)
    registry = get_registry()
    return Response({'ok': True, 'data': {
        'modules': registry.ordered(fixed),
        'added': registry.ordered(fixed - requested),
    }})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_modules(request):
    return Response({'ok': True, 'data': get_registry().ordered(effective_modules(request.user))})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_navigation(request):
    return Response({'ok': True, 'data': [m.as_dict() for m in navigation_for(request.user)]})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def module_presets(request):
    """Quick selections offered by the permission matrix for a role."""
    role = request.query_params.get('role') or 'staff'
    if role not in ('staff', 'admin'):
        return Response({'ok': False, 'error': {'code': 'invalid_role', 'message': f'Perfil inválido: {role}'}},
                        status=400)
    registry = get_registry()
    return Response({'ok': True, 'data': {
        'role': role,
        'default': registry.ordered(default_modules_for_role(role)),
        'all': registry.ordered(select_all_for_role(role)),
        'required': registry.ordered(select_required()),
    }})
