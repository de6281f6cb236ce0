"""
Staff roster (module ``employees``) and the report of documents about to
expire: medical exams, vaccines and professional council licences.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from django.db.models import Q, QuerySet
from django.utils import timezone
from django.utils.dateparse import parse_date

from core.models import Employee

logger = logging.getLogger(__name__)

EXPIRY_WINDOW_DAYS = 30


def _iso(d):
    return d.isoformat() if d else None


def serialize_employee(employee: Employee) -> dict:
    return {
        'id': employee.id,
        'fullName': employee.full_name,
        'cpf': employee.cpf,
        'rg': employee.rg,
        'birthDate': _iso(employee.birth_date),
        'address': employee.address,
        'position': employee.position,
        'unit': employee.unit,
        'status': employee.status,
        'photo': employee.photo,
        'observations': employee.observations,
        'receivesTransportation': employee.receives_transportation,
        'professionalLicense': {
            'council': employee.license_council,
            'licenseNumber': employee.license_number,
            'expiryDate': _iso(employee.license_expiry_date),
        },
        'employmentType': employee.employment_type,
        'exitDate': _iso(employee.exit_date),
        'exitReason': employee.exit_reason,
        'covidVaccines': employee.covid_vaccines or [],
        'medicalExams': employee.medical_exams or [],
        'generalVaccines': employee.general_vaccines or [],
        'vacations': employee.vacations or [],
        'employmentData': employee.employment_data or {},
        'createdAt': _iso(employee.created_at),
        'updatedAt': _iso(employee.updated_at),
    }


def filter_employees(*, status: Optional[str] = None, unit: Optional[str] = None,
                     position: Optional[str] = None, q: Optional[str] = None) -> QuerySet:
    qs = Employee.objects.all()
    if status:
        qs = qs.filter(status=status)
    if unit:
        qs = qs.filter(unit=unit)
    if position:
        qs = qs.filter(position=position)
    if q:
        qs = qs.filter(Q(full_name__icontains=q) | Q(cpf__icontains=q) | Q(license_number__icontains=q))
    return qs.order_by('full_name')


def _as_date(value) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return parse_date(str(value)[:10])
    except ValueError:
        logger.warning('ignoring malformed expiry date %r', value)
        return None


def expiring_items(*, days: int = EXPIRY_WINDOW_DAYS, today: Optional[date] = None) -> list[dict]:
    """Exams, vaccines and licences expiring between today and ``today + days``.

    Items come back soonest first.
    """
    today = today or timezone.localdate()
    limit = today + timedelta(days=days)
    items: list[dict] = []

    def add(employee, kind, description, raw):
        expiry = _as_date(raw)
        if expiry is None or not today <= expiry <= limit:
            return
        items.append({
            'employeeId': employee.id,
            'employeeName': employee.full_name,
            'type': kind,
            'description': description,
            'expiryDate': expiry.isoformat(),
            'daysUntilExpiry': (expiry - today).days,
        })

    for employee in Employee.objects.order_by('full_name'):
        for exam in employee.medical_exams or []:
            add(employee, 'Exame', f"{exam.get('type', '')} - {exam.get('result', '')}", exam.get('expiryDate'))
        for vaccine in employee.general_vaccines or []:
            add(employee, 'Vacina', vaccine.get('type', ''), vaccine.get('expiryDate'))
        for vaccine in employee.covid_vaccines or []:
            add(employee, 'Vacina', f"COVID {vaccine.get('dose', '')} - {vaccine.get('vaccineType', '')}",
                vaccine.get('expiryDate'))
        if employee.license_council != 'Não Possui':
            add(employee, 'Carteira Profissional', f"{employee.license_council} - {employee.license_number}",
                employee.license_expiry_date)

    items.sort(key=lambda i: (i['daysUntilExpiry'], i['employeeName']))
    return items
