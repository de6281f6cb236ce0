"""
Dashboard endpoint (module ``dashboard``).

Counts are only reported for the modules the user can open; a staff
member never sees lead numbers, whatever its stored selection holds.
"""
from __future__ import annotations

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Candidate, Employee, Guest, Lead, MedicalRecord, SobreavisoEmployee
from ..permissions import HasModule
from ..services.employees import expiring_items
from ..services.permissions import accessible_modules


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasModule('dashboard')])
def dashboard(request):
    enabled = accessible_modules(request.user)
    data = {}
    if 'guests' in enabled:
        guests = Guest.objects.filter(status='Ativo')
        data['activeGuests'] = guests.count()
        data['activeGuestsByUnit'] = {
            unit: guests.filter(unit=unit).count() for unit, _ in Guest._meta.get_field('unit').choices
        }
    if 'prontuario' in enabled:
        data['recordsToday'] = MedicalRecord.objects.filter(record_date=timezone.localdate()).count()
    if 'employees' in enabled:
        data['activeEmployees'] = Employee.objects.filter(status='Ativo').count()
        data['expiringItems'] = len(expiring_items())
    if 'sobreaviso' in enabled:
        data['onCall'] = SobreavisoEmployee.objects.filter(status='Ativo').count()
    if 'crm-leads' in enabled:
        data['openLeads'] = Lead.objects.exclude(stage__in=Lead.CLOSED_STAGES).count()
    if 'talent-bank' in enabled:
        data['candidatesInScreening'] = Candidate.objects.filter(status__in=['Novo', 'Triagem']).count()
    return Response({'ok': True, 'data': data})
