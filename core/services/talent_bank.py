"""
Talent bank: candidates who applied for a job and the recruiting board.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from core.models import Candidate, CandidateActivity, User
from core.services.audit import log_action
from core.services.pipeline import broadcast_move, move_entity

logger = logging.getLogger(__name__)

BOARD = 'talent-bank'


def _iso(dt):
    return dt.isoformat() if dt else None


def serialize_candidate(c: Candidate) -> dict:
    return {
        'id': c.id,
        'fullName': c.full_name,
        'email': c.email,
        'phone': c.phone,
        'desiredPosition': c.desired_position,
        'experienceYears': c.experience_years,
        'curriculumUrl': c.curriculum_url,
        'city': c.city,
        'state': c.state,
        'availability': c.availability,
        'salaryExpectation': c.salary_expectation,
        'status': c.status,
        'source': c.source,
        'lgpdConsent': c.lgpd_consent,
        'notes': c.notes,
        'createdAt': _iso(c.created_at),
        'updatedAt': _iso(c.updated_at),
    }


def serialize_activity(a: CandidateActivity) -> dict:
    return {
        'id': a.id,
        'candidateId': a.candidate_id,
        'type': a.type,
        'title': a.title,
        'description': a.description,
        'scheduledAt': _iso(a.scheduled_at),
        'completedAt': _iso(a.completed_at),
        'status': a.status,
        'createdBy': a.created_by_id,
        'createdAt': _iso(a.created_at),
    }


@transaction.atomic
def register_public_candidate(data: dict) -> Candidate:
    """Self-service registration from the public site form."""
    candidate = Candidate.objects.create(
        full_name=data['fullName'],
        email=data['email'],
        phone=data['phone'],
        desired_position=data['desiredPosition'],
        experience_years=data.get('experienceYears') or 0,
        city=data.get('city', ''),
        state=settings.PUBLIC_CANDIDATE_STATE,
        availability=data.get('availability', ''),
        salary_expectation=data.get('salaryExpectation', ''),
        status='Novo',
        source='Site/Formulário',
        lgpd_consent=True,
        notes='Cadastro via formulário público',
    )
    CandidateActivity.objects.create(
        candidate=candidate,
        type='Anotação',
        title='Candidato cadastrado via site',
        description='Novo candidato se cadastrou através do formulário público do site. Realizar triagem inicial.',
        status='Pendente',
    )
    logger.info('public candidate %s registered for %s', candidate.id, candidate.desired_position)
    return candidate


def create_candidate(actor: User, fields: dict) -> Candidate:
    fields.setdefault('status', 'Novo')
    fields.setdefault('source', 'Outro')
    candidate = Candidate.objects.create(created_by=actor, **fields)
    log_action(user=actor, action='candidate_create', object_type='candidate', object_id=candidate.id)
    return candidate


def update_candidate(candidate: Candidate, actor: User, fields: dict) -> Candidate:
    new_status = fields.pop('status', None)
    for attr, value in fields.items():
        setattr(candidate, attr, value)
    if fields:
        candidate.save(update_fields=list(fields) + ['updated_at'])
    if new_status:
        move_candidate(candidate, candidate.status, new_status, actor=actor)
    return candidate


def move_candidate(candidate: Candidate, from_status: str, to_status: str, *,
                   actor: Optional[User] = None) -> Candidate:
    def on_moved(entity, old, new):
        now = timezone.now()
        CandidateActivity.objects.create(
            candidate=entity,
            type='Anotação',
            title=f"Status alterado para: {new}",
            description=f"Status do candidato foi alterado para {new}",
            status='Concluída',
            completed_at=now,
            created_by=actor,
        )
        log_action(user=actor, action='candidate_move', object_type='candidate', object_id=entity.id,
                   detail={'from': old, 'to': new})
        broadcast_move(BOARD, entity.id, old, new)

    return move_entity(candidate, from_status, to_status, field='status', on_moved=on_moved)


def filter_candidates(*, status=None, position=None, city=None, source=None, q=None,
                      dateFrom=None, dateTo=None) -> QuerySet:
    qs = Candidate.objects.all()
    if status:
        qs = qs.filter(status=status)
    if position:
        qs = qs.filter(desired_position__icontains=position)
    if city:
        qs = qs.filter(city__icontains=city)
    if source:
        qs = qs.filter(source=source)
    if q:
        qs = qs.filter(Q(full_name__icontains=q) | Q(email__icontains=q) | Q(phone__icontains=q))
    if dateFrom:
        qs = qs.filter(created_at__date__gte=dateFrom)
    if dateTo:
        qs = qs.filter(created_at__date__lte=dateTo)
    return qs.order_by('-created_at')


def board() -> list[dict]:
    columns = {status: [] for status in Candidate.STATUSES}
    for c in Candidate.objects.order_by('-updated_at'):
        columns.setdefault(c.status, []).append(serialize_candidate(c))
    return [{'status': s, 'count': len(items), 'candidates': items} for s, items in columns.items()]


def add_activity(candidate: Candidate, actor: User, data: dict) -> CandidateActivity:
    status = data.get('status') or 'Pendente'
    return CandidateActivity.objects.create(
        candidate=candidate,
        type=data.get('type') or 'Anotação',
        title=data['title'],
        description=data.get('description', ''),
        scheduled_at=data.get('scheduledAt'),
        status=status,
        completed_at=timezone.now() if status == 'Concluída' else None,
        created_by=actor,
    )


def complete_activity(activity: CandidateActivity) -> CandidateActivity:
    activity.status = 'Concluída'
    activity.completed_at = timezone.now()
    activity.save(update_fields=['status', 'completed_at'])
    return activity


def stats() -> dict:
    candidates = list(Candidate.objects.only('status', 'desired_position', 'source', 'created_at'))
    total = len(candidates)
    by_status = Counter(c.status for c in candidates)
    since = timezone.now() - timedelta(days=30)
    hired = by_status['Contratado']
    return {
        'total': total,
        'byStatus': {s: by_status[s] for s in Candidate.STATUSES},
        'topPositions': [
            {'position': p, 'count': n}
            for p, n in Counter(c.desired_position for c in candidates).most_common(10)
        ],
        'bySource': [{'source': s, 'count': n} for s, n in Counter(c.source for c in candidates).most_common()],
        'last30Days': sum(1 for c in candidates if c.created_at and c.created_at >= since),
        'hiringRate': round(hired / total * 100, 1) if total else 0.0,
    }
