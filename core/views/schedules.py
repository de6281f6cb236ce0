"""
Monthly schedule views, module ``schedules``.

The grid, its substitutions and the monthly report are all addressed by
the same four query keys: ``scheduleType``, ``unit``, ``month`` and
``year``.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import HasModule
from ..serializers.schedules import (
    RosterEmployeesQuerySerializer,
    RosterSerializer,
    ShiftUpdateSerializer,
    SubstitutionKeySerializer,
    SubstitutionSerializer,
)
from ..services import schedules as svc

SCHEDULES_ACCESS = [IsAuthenticated, HasModule('schedules')]


def _roster(params) -> dict:
    q = RosterSerializer(data=params)
    q.is_valid(raise_exception=True)
    d = q.validated_data
    return {'schedule_type': d['scheduleType'], 'unit': d['unit'], 'month': d['month'], 'year': d['year']}


@api_view(['GET'])
@permission_classes(SCHEDULES_ACCESS)
def roster_employees(request):
    q = RosterEmployeesQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = svc.schedule_employees(q.validated_data['scheduleType'], q.validated_data['unit'])
    return Response({'ok': True, 'data': [svc.serialize_schedule_employee(e) for e in qs]})


@api_view(['GET', 'DELETE'])
@permission_classes(SCHEDULES_ACCESS)
def schedule_month(request):
    key = _roster(request.query_params)
    if request.method == 'DELETE':
        return Response({'ok': True, 'data': svc.clear_month(**key, actor=request.user)})
    return Response({'ok': True, 'data': {
        'daysInMonth': svc.days_in_month(key['month'], key['year']),
        'schedules': [svc.serialize_schedule(s) for s in svc.month_schedules(**key).order_by('employee__full_name')],
        'substitutions': [svc.serialize_substitution(s) for s in svc.month_substitutions(**key)],
    }})


@api_view(['PUT'])
@permission_classes(SCHEDULES_ACCESS)
def schedule_day(request):
    s = ShiftUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    schedule = svc.set_shift(d['employee'], d['scheduleType'], d['unit'], d['month'], d['year'], d['day'],
                             d['shift'], actor=request.user)
    return Response({'ok': True, 'data': svc.serialize_schedule(schedule)})


@api_view(['POST', 'DELETE'])
@permission_classes(SCHEDULES_ACCESS)
def substitutions(request):
    if request.method == 'DELETE':
        q = SubstitutionKeySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        d = q.validated_data
        deleted = svc.remove_substitution(d['employeeId'], d['scheduleType'], d['unit'], d['month'], d['year'],
                                          d['day'], actor=request.user)
        return Response({'ok': True, 'data': {'deleted': deleted}})
    s = SubstitutionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    sub = svc.add_substitution(s.validated_data['employee'], s.validated_data, actor=request.user)
    return Response({'ok': True, 'data': svc.serialize_substitution(sub)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes(SCHEDULES_ACCESS)
def schedule_report(request):
    return Response({'ok': True, 'data': svc.monthly_report(**_roster(request.query_params))})
