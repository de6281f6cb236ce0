"""
Staff roster views, module ``employees``.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Employee
from ..permissions import HasModule
from ..serializers.employees import EmployeeListQuerySerializer, EmployeeSerializer, ExpiringQuerySerializer
from ..services.audit import log_action
from ..services.employees import expiring_items, filter_employees, serialize_employee

EMPLOYEES_ACCESS = [IsAuthenticated, HasModule('employees')]


@api_view(['GET', 'POST'])
@permission_classes(EMPLOYEES_ACCESS)
def employees_list(request):
    if request.method == 'GET':
        q = EmployeeListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        return Response({'ok': True, 'data': [serialize_employee(e) for e in filter_employees(**q.validated_data)]})
    s = EmployeeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    employee = Employee.objects.create(**s.to_model_fields())
    log_action(user=request.user, action='employee_create', object_type='employee', object_id=employee.id)
    return Response({'ok': True, 'data': serialize_employee(employee)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes(EMPLOYEES_ACCESS)
def employee_detail(request, pk: int):
    employee = get_object_or_404(Employee, pk=pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_employee(employee)})
    if request.method in ('PUT', 'PATCH'):
        s = EmployeeSerializer(employee, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        fields = s.to_model_fields()
        for attr, value in fields.items():
            setattr(employee, attr, value)
        employee.save()
        log_action(user=request.user, action='employee_update', object_type='employee', object_id=employee.id,
                   detail={'fields': sorted(fields)})
        return Response({'ok': True, 'data': serialize_employee(employee)})
    eid = employee.id
    employee.delete()
    log_action(user=request.user, action='employee_delete', object_type='employee', object_id=eid)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes(EMPLOYEES_ACCESS)
def employees_expiring(request):
    """Exams, vaccines and licences that expire within ``days`` (default 30)."""
    q = ExpiringQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response({'ok': True, 'data': expiring_items(days=q.validated_data['days'])})
