"""
Monthly work schedules (module ``schedules``).

A schedule is keyed by employee, schedule type, unit, month and year and
holds one shift code per day.  Substitutions record the days someone else
covered; the monthly report counts both.
"""
from __future__ import annotations

import calendar
import logging
from collections import Counter
from typing import Optional

from django.db import transaction
from django.db.models import QuerySet
from rest_framework.exceptions import ValidationError

from core.models import SHIFT_CHOICES, Employee, ScheduleSubstitution, User, WorkSchedule
from core.services.audit import log_action

logger = logging.getLogger(__name__)

SHIFTS = [code for code, _ in SHIFT_CHOICES]
# DR is a rest day: it fills a cell but is not a day worked
REST_SHIFT = 'DR'

SCHEDULE_POSITIONS = {
    'Enfermagem': ('Enfermeira', 'Técnico de Enfermagem', 'Cuidador de Idosos'),
    'Nutrição': ('Nutricionista', 'Cozinheira'),
}


def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(year, month)[1]


def check_day(day: int, month: int, year: int) -> None:
    if not 1 <= day <= days_in_month(month, year):
        raise ValidationError({'day': f'Dia inválido para {month:02d}/{year}: {day}'})


def serialize_schedule_employee(employee: Employee) -> dict:
    return {
        'id': employee.id,
        'name': employee.full_name,
        'position': employee.position,
        'cpf': employee.cpf,
        'professionalRegistry': employee.license_number,
        'unit': employee.unit,
    }


def serialize_schedule(schedule: WorkSchedule) -> dict:
    return {
        'id': schedule.id,
        'employeeId': schedule.employee_id,
        'scheduleType': schedule.schedule_type,
        'unit': schedule.unit,
        'month': schedule.month,
        'year': schedule.year,
        'days': {str(d): schedule.days.get(str(d)) for d in range(1, days_in_month(schedule.month, schedule.year) + 1)},
        'updatedAt': schedule.updated_at.isoformat() if schedule.updated_at else None,
    }


def serialize_substitution(sub: ScheduleSubstitution) -> dict:
    return {
        'id': sub.id,
        'employeeId': sub.employee_id,
        'scheduleType': sub.schedule_type,
        'unit': sub.unit,
        'month': sub.month,
        'year': sub.year,
        'day': sub.day,
        'substituteId': sub.substitute_id,
        'substituteName': sub.substitute_name,
        'reason': sub.reason,
        'createdAt': sub.created_at.isoformat() if sub.created_at else None,
    }


def schedule_employees(schedule_type: str, unit: str) -> QuerySet:
    """Active employees of ``unit`` that belong on a ``schedule_type`` roster.

    The general schedule takes everybody in the unit.
    """
    qs = Employee.objects.filter(status='Ativo', unit=unit)
    positions = SCHEDULE_POSITIONS.get(schedule_type)
    if positions:
        qs = qs.filter(position__in=positions)
    return qs.order_by('full_name')


def month_schedules(schedule_type: str, unit: str, month: int, year: int) -> QuerySet:
    return WorkSchedule.objects.filter(schedule_type=schedule_type, unit=unit, month=month, year=year)


def month_substitutions(schedule_type: str, unit: str, month: int, year: int) -> QuerySet:
    return ScheduleSubstitution.objects.filter(
        schedule_type=schedule_type, unit=unit, month=month, year=year
    ).order_by('day', 'id')


@transaction.atomic
def set_shift(employee: Employee, schedule_type: str, unit: str, month: int, year: int, day: int,
              shift: Optional[str], *, actor: Optional[User] = None) -> WorkSchedule:
    """Write one cell of the grid; ``shift=None`` clears it."""
    check_day(day, month, year)
    schedule, _ = WorkSchedule.objects.select_for_update().get_or_create(
        employee=employee, schedule_type=schedule_type, unit=unit, month=month, year=year,
        defaults={'created_by': actor},
    )
    days = dict(schedule.days or {})
    if shift:
        days[str(day)] = shift
    else:
        days.pop(str(day), None)
    schedule.days = days
    schedule.save(update_fields=['days', 'updated_at'])
    return schedule


@transaction.atomic
def add_substitution(employee: Employee, data: dict, *, actor: Optional[User] = None) -> ScheduleSubstitution:
    """Record (or replace) the substitute covering ``employee`` on one day."""
    check_day(data['day'], data['month'], data['year'])
    substitute = data.get('substitute')
    sub, created = ScheduleSubstitution.objects.update_or_create(
        employee=employee, schedule_type=data['scheduleType'], unit=data['unit'],
        month=data['month'], year=data['year'], day=data['day'],
        defaults={
            'substitute': substitute,
            'substitute_name': data.get('substituteName') or (substitute.full_name if substitute else ''),
            'reason': data.get('reason', ''),
        },
    )
    log_action(user=actor, action='substitution_create' if created else 'substitution_update',
               object_type='employee', object_id=employee.id,
               detail={'day': sub.day, 'month': sub.month, 'year': sub.year, 'substitute': sub.substitute_name})
    return sub


def remove_substitution(employee_id: int, schedule_type: str, unit: str, month: int, year: int, day: int,
                        *, actor: Optional[User] = None) -> int:
    deleted, _ = ScheduleSubstitution.objects.filter(
        employee_id=employee_id, schedule_type=schedule_type, unit=unit, month=month, year=year, day=day,
    ).delete()
    if deleted:
        log_action(user=actor, action='substitution_delete', object_type='employee', object_id=employee_id,
                   detail={'day': day, 'month': month, 'year': year})
    return deleted


@transaction.atomic
def clear_month(schedule_type: str, unit: str, month: int, year: int, *, actor: Optional[User] = None) -> dict:
    """Drop every schedule and substitution of one month of one roster."""
    schedules, _ = month_schedules(schedule_type, unit, month, year).delete()
    substitutions, _ = month_substitutions(schedule_type, unit, month, year).delete()
    log_action(user=actor, action='schedule_clear', object_type='schedule',
               detail={'scheduleType': schedule_type, 'unit': unit, 'month': month, 'year': year})
    logger.info('cleared %s/%s %02d/%d: %d schedules, %d substitutions',
                schedule_type, unit, month, year, schedules, substitutions)
    return {'schedules': schedules, 'substitutions': substitutions}


def monthly_report(schedule_type: str, unit: str, month: int, year: int) -> list[dict]:
    """Shift counts per employee of the roster, followed by the substitutes.

    ``actualDaysWorked`` counts filled non-rest days that nobody covered;
    covered ones go to ``substitutions``.  Each substitute (curinga) gets a
    row with the number of days covered.
    """
    last_day = days_in_month(month, year)
    grids = {s.employee_id: s.days or {} for s in month_schedules(schedule_type, unit, month, year)}
    subs = list(month_substitutions(schedule_type, unit, month, year))
    covered: dict[int, set[int]] = {}
    for sub in subs:
        covered.setdefault(sub.employee_id, set()).add(sub.day)

    rows = []
    for employee in schedule_employees(schedule_type, unit):
        grid = grids.get(employee.id, {})
        breakdown = dict.fromkeys(SHIFTS, 0)
        total = worked = substituted = 0
        for day in range(1, last_day + 1):
            shift = grid.get(str(day))
            if not shift:
                continue
            total += 1
            if shift in breakdown:
                breakdown[shift] += 1
            if shift == REST_SHIFT:
                continue
            if day in covered.get(employee.id, ()):
                substituted += 1
            else:
                worked += 1
        rows.append({
            'employeeId': employee.id,
            'employeeName': employee.full_name,
            'position': employee.position,
            'unit': employee.unit,
            'totalShifts': total,
            'shiftBreakdown': breakdown,
            'substitutions': substituted,
            'actualDaysWorked': worked,
            'isSubstitute': False,
        })
    rows.sort(key=lambda r: -r['actualDaysWorked'])

    by_substitute = Counter(sub.substitute_name for sub in subs)
    for name, count in by_substitute.items():
        rows.append({
            'employeeId': None,
            'employeeName': f'{name} (CURINGA)',
            'position': 'Curinga/Substituto',
            'unit': unit,
            'totalShifts': count,
            'shiftBreakdown': dict.fromkeys(SHIFTS, 0),
            'substitutions': 0,
            'actualDaysWorked': count,
            'isSubstitute': True,
        })
    return rows
