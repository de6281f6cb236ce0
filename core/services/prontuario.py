"""
Multidisciplinary medical record (prontuário).

Every position reads every specialty; a clinical position writes only the
specialty it maps to and ``Administrador`` writes all of them.  Records can
be edited by their author on the day they were written and until they are
signed; signing stamps a SHA-256 hash over the record and locks it.
"""
from __future__ import annotations

import hashlib
import json
import logging
from collections import Counter
from typing import Optional

from django.db.models import Q, QuerySet
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from core.exceptions import RecordLocked
from core.models import Guest, MedicalRecord, User
from core.services.audit import log_action

logger = logging.getLogger(__name__)

SPECIALTIES = [value for value, _ in MedicalRecord.SPECIALTY_CHOICES]

# checked in order; first match wins
POSITION_KEYWORDS = [
    (('técnico de enfermagem', 'tecnico de enfermagem'), 'Técnico de Enfermagem'),
    (('médic', 'medic'), 'Medicina'),
    (('enfermeir',), 'Enfermagem'),
    (('fisio',), 'Fisioterapia'),
    (('fono',), 'Fonoaudiologia'),
    (('psic',), 'Psicologia'),
    (('nutri',), 'Nutrição'),
    (('social',), 'Serviço Social'),
]
DEFAULT_SPECIALTY = 'Técnico de Enfermagem'


def is_records_admin(position: str) -> bool:
    return 'administrador' in (position or '').lower()


def specialty_for_position(position: str) -> Optional[str]:
    """Specialty a position writes in; ``None`` for administrators (all)."""
    if is_records_admin(position):
        return None
    lowered = (position or '').lower()
    for keywords, specialty in POSITION_KEYWORDS:
        if any(k in lowered for k in keywords):
            return specialty
    return DEFAULT_SPECIALTY


def can_read(user: User, specialty: str) -> bool:
    return specialty in SPECIALTIES


def can_write(user: User, specialty: str) -> bool:
    if specialty not in SPECIALTIES:
        return False
    own = specialty_for_position(user.position)
    return own is None or own == specialty


def permissions_for(user: User) -> dict:
    return {
        'position': user.position,
        'specialty': specialty_for_position(user.position),
        'canRead': [s for s in SPECIALTIES if can_read(user, s)],
        'canWrite': [s for s in SPECIALTIES if can_write(user, s)],
    }


def serialize_record(record: MedicalRecord) -> dict:
    return {
        'id': record.id,
        'guestId': record.guest_id,
        'guestName': record.guest.full_name if record.guest_id else None,
        'specialty': record.specialty,
        'recordDate': record.record_date.isoformat(),
        'shift': record.shift,
        'professionalId': record.professional_id,
        'professionalName': record.professional_name,
        'professionalRegistry': record.professional_registry,
        'content': record.content,
        'isLocked': record.is_locked,
        'signature': record.signature,
        'createdAt': record.created_at.isoformat() if record.created_at else None,
        'updatedAt': record.updated_at.isoformat() if record.updated_at else None,
    }


def create_record(guest: Guest, user: User, data: dict) -> MedicalRecord:
    specialty = data['specialty']
    if not can_write(user, specialty):
        raise PermissionDenied(f"{user.position or 'Cargo'} não pode evoluir em {specialty}")
    record = MedicalRecord.objects.create(
        guest=guest,
        specialty=specialty,
        record_date=data.get('recordDate') or timezone.localdate(),
        shift=data.get('shift') or 'SD',
        professional=user,
        professional_name=user.get_full_name() or user.username,
        professional_registry=data.get('professionalRegistry', ''),
        content=data.get('content') or {},
    )
    log_action(user=user, action='record_create', object_type='medical_record', object_id=record.id,
               detail={'guestId': guest.id, 'specialty': specialty})
    return record


def ensure_editable(record: MedicalRecord, user: User) -> None:
    if record.is_locked:
        raise RecordLocked()
    if record.professional_id != user.id:
        raise PermissionDenied('Somente o autor pode editar esta evolução')
    if record.record_date != timezone.localdate():
        raise PermissionDenied('Somente evoluções do dia podem ser editadas')


def update_record(record: MedicalRecord, user: User, data: dict) -> MedicalRecord:
    ensure_editable(record, user)
    fields = ['updated_at']
    if 'shift' in data:
        record.shift = data['shift']
        fields.append('shift')
    if 'professionalRegistry' in data:
        record.professional_registry = data['professionalRegistry']
        fields.append('professional_registry')
    if 'content' in data:
        record.content = data['content']
        fields.append('content')
    record.save(update_fields=fields)
    log_action(user=user, action='record_update', object_type='medical_record', object_id=record.id)
    return record


def signature_hash(record: MedicalRecord, signed_at: str, signer_name: str, signer_cpf: str) -> str:
    payload = {
        'id': record.id,
        'guestId': record.guest_id,
        'specialty': record.specialty,
        'recordDate': record.record_date.isoformat(),
        'shift': record.shift,
        'professionalId': record.professional_id,
        'content': record.content,
        'signedAt': signed_at,
        'signerName': signer_name,
        'signerCpf': signer_cpf,
    }
    raw = json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(raw.encode('utf-8')).hexdigest()


def sign_record(record: MedicalRecord, user: User, data: dict) -> MedicalRecord:
    if record.is_locked:
        raise RecordLocked('Evolução já assinada')
    if not can_write(user, record.specialty):
        raise PermissionDenied('Sem permissão para assinar nesta especialidade')
    signed_at = timezone.now().isoformat()
    signer_name = user.get_full_name() or user.username
    signer_cpf = data.get('signerCpf') or user.cpf
    record.signature = {
        'signedAt': signed_at,
        'signatureType': data.get('signatureType') or 'institutional',
        'signerName': signer_name,
        'signerCpf': signer_cpf,
        'signerRegistry': data.get('signerRegistry') or record.professional_registry,
        'institutionStamp': f"A Casa - {record.guest.unit}",
        'hash': signature_hash(record, signed_at, signer_name, signer_cpf),
        'isValid': True,
    }
    record.is_locked = True
    record.save(update_fields=['signature', 'is_locked', 'updated_at'])
    log_action(user=user, action='record_sign', object_type='medical_record', object_id=record.id)
    logger.info('medical record %s signed by %s', record.id, user.pk)
    return record


def verify_signature(record: MedicalRecord) -> bool:
    sig = record.signature or {}
    if not sig.get('hash'):
        return False
    expected = signature_hash(record, sig.get('signedAt', ''), sig.get('signerName', ''), sig.get('signerCpf', ''))
    return expected == sig['hash']


def filter_records(guest: Guest, *, dateFrom=None, dateTo=None, specialty=None, shift=None, q=None) -> QuerySet:
    qs = MedicalRecord.objects.select_related('guest').filter(guest=guest)
    if dateFrom:
        qs = qs.filter(record_date__gte=dateFrom)
    if dateTo:
        qs = qs.filter(record_date__lte=dateTo)
    if specialty:
        qs = qs.filter(specialty=specialty)
    if shift:
        qs = qs.filter(shift=shift)
    if q:
        qs = qs.filter(Q(professional_name__icontains=q) | Q(content__icontains=q))
    return qs.order_by('-record_date', '-created_at')


def summarize(records) -> dict:
    records = list(records)
    dates = sorted(r.record_date for r in records)
    return {
        'total': len(records),
        'byShift': dict(Counter(r.shift for r in records)),
        'bySpecialty': dict(Counter(r.specialty for r in records)),
        'byProfessional': dict(Counter(r.professional_name for r in records)),
        'firstDate': dates[0].isoformat() if dates else None,
        'lastDate': dates[-1].isoformat() if dates else None,
    }
