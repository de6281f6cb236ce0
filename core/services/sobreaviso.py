from typing import Optional

from django.db.models import Q, QuerySet

from core.models import SobreavisoEmployee


def serialize_sobreaviso(entry: SobreavisoEmployee) -> dict:
    return {
        'id': entry.id,
        'fullName': entry.full_name,
        'cpf': entry.cpf,
        'position': entry.position,
        'phone': entry.phone,
        'pix': entry.pix,
        'unit': entry.unit,
        'status': entry.status,
        'observations': entry.observations,
        'createdAt': entry.created_at.isoformat() if entry.created_at else None,
        'updatedAt': entry.updated_at.isoformat() if entry.updated_at else None,
    }


def filter_sobreaviso(*, unit: Optional[str] = None, status: Optional[str] = None,
                      q: Optional[str] = None) -> QuerySet:
    """On-call list; filtering by unit keeps only active people of that unit or of both."""
    qs = SobreavisoEmployee.objects.all()
    if unit:
        qs = qs.filter(status='Ativo').filter(Q(unit=unit) | Q(unit='Ambas'))
    elif status:
        qs = qs.filter(status=status)
    if q:
        qs = qs.filter(Q(full_name__icontains=q) | Q(position__icontains=q) | Q(phone__icontains=q))
    return qs.order_by('full_name')
