from typing import Optional

from django.db.models import Q, QuerySet

from core.models import Guest


def serialize_guest(guest: Guest) -> dict:
    return {
        'id': guest.id,
        'fullName': guest.full_name,
        'gender': guest.gender,
        'birthDate': guest.birth_date.isoformat() if guest.birth_date else None,
        'cpf': guest.cpf,
        'rg': guest.rg,
        'hasCuratorship': guest.has_curatorship,
        'imageUsageAuthorized': guest.image_usage_authorized,
        'status': guest.status,
        'admissionDate': guest.admission_date.isoformat() if guest.admission_date else None,
        'exitDate': guest.exit_date.isoformat() if guest.exit_date else None,
        'exitReason': guest.exit_reason,
        'contractExpiryDate': guest.contract_expiry_date.isoformat() if guest.contract_expiry_date else None,
        'dependencyLevel': guest.dependency_level,
        'legalResponsibleRelationship': guest.legal_responsible_relationship,
        'legalResponsibleCpf': guest.legal_responsible_cpf,
        'financialResponsibleName': guest.financial_responsible_name,
        'financialResponsiblePhone': guest.financial_responsible_phone,
        'financialResponsibleEmail': guest.financial_responsible_email,
        'unit': guest.unit,
        'roomNumber': guest.room_number,
        'healthPlan': guest.health_plan,
        'hasPhysiotherapy': guest.has_physiotherapy,
        'hasSpeechTherapy': guest.has_speech_therapy,
        'vaccinationUpToDate': guest.vaccination_up_to_date,
        'vaccines': guest.vaccines or [],
        'createdAt': guest.created_at.isoformat() if guest.created_at else None,
        'updatedAt': guest.updated_at.isoformat() if guest.updated_at else None,
    }


def filter_guests(*, status: Optional[str] = None, unit: Optional[str] = None, q: Optional[str] = None) -> QuerySet:
    qs = Guest.objects.all()
    if status:
        qs = qs.filter(status=status)
    if unit:
        qs = qs.filter(unit=unit)
    if q:
        qs = qs.filter(Q(full_name__icontains=q) | Q(cpf__icontains=q) | Q(room_number__iexact=q))
    return qs.order_by('full_name')
