"""
Commercial CRM: contacts, leads, follow-up activities and the WhatsApp inbox.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta
from typing import Optional

from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.models import Contact, Lead, LeadActivity, Unit, User, WhatsAppMessage
from core.services import whatsapp
from core.services.audit import log_action
from core.services.pipeline import broadcast_move, move_entity

logger = logging.getLogger(__name__)

BOARD = 'crm'


def _iso(dt):
    return dt.isoformat() if dt else None


def serialize_unit(unit: Unit) -> dict:
    return {'id': unit.id, 'name': unit.name}


def serialize_contact(contact: Optional[Contact]) -> Optional[dict]:
    if contact is None:
        return None
    return {
        'id': contact.id,
        'unitId': contact.unit_id,
        'fullName': contact.full_name,
        'relation': contact.relation,
        'phone': contact.phone,
        'email': contact.email,
        'neighborhood': contact.neighborhood,
        'notes': contact.notes,
        'lgpdConsent': contact.lgpd_consent,
        'lgpdConsentAt': _iso(contact.lgpd_consent_at),
    }


def serialize_activity(activity: LeadActivity) -> dict:
    return {
        'id': activity.id,
        'leadId': activity.lead_id,
        'type': activity.type,
        'title': activity.title,
        'description': activity.description,
        'dueAt': _iso(activity.due_at),
        'done': activity.done,
        'createdBy': activity.created_by_id,
        'createdAt': _iso(activity.created_at),
    }


def serialize_lead(lead: Lead) -> dict:
    return {
        'id': lead.id,
        'stage': lead.stage,
        'source': lead.source,
        'ownerId': lead.owner_id,
        'ownerName': (lead.owner.get_full_name() or lead.owner.username) if lead.owner_id else None,
        'diagnosis': lead.diagnosis,
        'dependencyGrade': lead.dependency_grade,
        'elderlyName': lead.elderly_name,
        'elderlyAge': lead.elderly_age,
        'valueBand': lead.value_band,
        'contact': serialize_contact(lead.contact),
        'createdAt': _iso(lead.created_at),
        'updatedAt': _iso(lead.updated_at),
    }


def serialize_message(msg: WhatsAppMessage) -> dict:
    return {
        'id': msg.id,
        'leadId': msg.lead_id,
        'waFrom': msg.wa_from,
        'waTo': msg.wa_to,
        'direction': msg.direction,
        'body': msg.body,
        'waMsgId': msg.wa_msg_id,
        'createdAt': _iso(msg.created_at),
    }


# ---------------------------------------------------------------------
# Contacts & leads
# ---------------------------------------------------------------------
def find_contact_by_phone(phone: Optional[str]) -> Optional[Contact]:
    """Existing contact with the same number once both are normalized."""
    wanted = whatsapp.normalize_phone(phone)
    if not wanted:
        return None
    candidates = Contact.objects.filter(phone__contains=wanted[-4:]).order_by('id')
    for contact in candidates:
        if whatsapp.normalize_phone(contact.phone) == wanted:
            return contact
    return None


def _contact_from_payload(data: dict, actor: Optional[User]) -> Contact:
    existing = find_contact_by_phone(data.get('phone'))
    if existing is not None:
        return existing
    consent = bool(data.get('lgpdConsent'))
    return Contact.objects.create(
        unit=Unit.objects.filter(id=data.get('unitId')).first() if data.get('unitId') else None,
        full_name=data.get('fullName', ''),
        relation=data.get('relation', ''),
        phone=data.get('phone', ''),
        email=data.get('email', ''),
        neighborhood=data.get('neighborhood', ''),
        notes=data.get('notes', ''),
        lgpd_consent=consent,
        lgpd_consent_at=timezone.now() if consent else None,
        created_by=actor,
    )


LEAD_FIELDS = {
    'source': 'source',
    'diagnosis': 'diagnosis',
    'dependencyGrade': 'dependency_grade',
    'elderlyName': 'elderly_name',
    'elderlyAge': 'elderly_age',
    'valueBand': 'value_band',
}


@transaction.atomic
def create_lead(actor: User, data: dict) -> Lead:
    contact = None
    if data.get('contactId'):
        contact = Contact.objects.filter(id=data['contactId']).first()
        if contact is None:
            raise ValidationError({'contactId': 'Contato não encontrado'})
    elif data.get('contact'):
        contact = _contact_from_payload(data['contact'], actor)
    owner = User.objects.filter(id=data['ownerId']).first() if data.get('ownerId') else None
    lead = Lead.objects.create(
        contact=contact,
        stage=data.get('stage') or 'Novo',
        owner=owner,
        created_by=actor,
        **{attr: data[key] for key, attr in LEAD_FIELDS.items() if data.get(key) is not None},
    )
    log_action(user=actor, action='lead_create', object_type='lead', object_id=lead.id)
    return lead


def update_lead(lead: Lead, actor: User, data: dict) -> Lead:
    fields = []
    for key, attr in LEAD_FIELDS.items():
        if key in data:
            setattr(lead, attr, data[key])
            fields.append(attr)
    if 'ownerId' in data:
        lead.owner = User.objects.filter(id=data['ownerId']).first() if data['ownerId'] else None
        fields.append('owner')
    if fields:
        lead.save(update_fields=fields + ['updated_at'])
    if data.get('stage'):
        move_lead(lead, lead.stage, data['stage'], actor=actor)
    return lead


def move_lead(lead: Lead, from_stage: str, to_stage: str, *, actor: Optional[User] = None) -> Lead:
    def on_moved(entity, old, new):
        log_action(user=actor, action='lead_move', object_type='lead', object_id=entity.id,
                   detail={'from': old, 'to': new})
        broadcast_move(BOARD, entity.id, old, new)

    return move_entity(lead, from_stage, to_stage, on_moved=on_moved)


def filter_leads(*, stage=None, unitId=None, ownerId=None, q=None, createdFrom=None, createdTo=None) -> QuerySet:
    qs = Lead.objects.select_related('contact', 'owner')
    if stage:
        qs = qs.filter(stage=stage)
    if unitId:
        qs = qs.filter(contact__unit_id=unitId)
    if ownerId:
        qs = qs.filter(owner_id=ownerId)
    if q:
        qs = qs.filter(
            Q(elderly_name__icontains=q)
            | Q(contact__full_name__icontains=q)
            | Q(contact__phone__icontains=q)
            | Q(diagnosis__icontains=q)
        )
    if createdFrom:
        qs = qs.filter(created_at__date__gte=createdFrom)
    if createdTo:
        qs = qs.filter(created_at__date__lte=createdTo)
    return qs.order_by('-created_at')


def board() -> list[dict]:
    """Leads grouped by stage in board order."""
    columns = {stage: [] for stage in Lead.STAGES}
    for lead in Lead.objects.select_related('contact', 'owner').order_by('-updated_at'):
        columns.setdefault(lead.stage, []).append(serialize_lead(lead))
    return [{'stage': stage, 'count': len(items), 'leads': items} for stage, items in columns.items()]


# ---------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------
def add_activity(lead: Lead, actor: Optional[User], data: dict, *, done: bool = False) -> LeadActivity:
    return LeadActivity.objects.create(
        lead=lead,
        type=data.get('type') or 'task',
        title=data['title'],
        description=data.get('description', ''),
        due_at=data.get('dueAt'),
        done=done,
        created_by=actor,
    )


def toggle_activity(activity: LeadActivity) -> LeadActivity:
    activity.done = not activity.done
    activity.save(update_fields=['done', 'updated_at'])
    return activity


# ---------------------------------------------------------------------
# WhatsApp inbox
# ---------------------------------------------------------------------
def _preview(body: str) -> str:
    return f"{body[:100]}..." if len(body) > 100 else body


@transaction.atomic
def send_lead_message(lead: Lead, actor: User, body: str) -> WhatsAppMessage:
    """Send through the bot; the message is stored only once the bot accepted it."""
    phone = lead.contact.phone if lead.contact_id else ''
    if not whatsapp.digits(phone):
        raise ValidationError({'phone': 'Lead sem telefone de contato'})
    sent = whatsapp.send_message(phone, body)
    msg = WhatsAppMessage.objects.create(
        lead=lead, wa_from='bot', wa_to=sent.wa_to, direction='outbound',
        body=body, wa_msg_id=sent.wa_msg_id,
    )
    add_activity(lead, actor, {'type': 'msg', 'title': 'Mensagem WhatsApp enviada',
                               'description': _preview(body)}, done=True)
    return msg


@transaction.atomic
def receive_inbound(data: dict) -> WhatsAppMessage:
    """Attach a message received by the bot to the open lead of its sender."""
    wa_from = whatsapp.normalize_phone(data['waFrom'])
    contact = find_contact_by_phone(wa_from)
    if contact is None:
        contact = Contact.objects.create(
            full_name=data.get('notifyName') or f"Contato {wa_from[-4:]}",
            phone=wa_from,
            lgpd_consent=False,
            notes='Contato criado automaticamente via WhatsApp',
        )
    lead = (
        Lead.objects.filter(contact=contact)
        .exclude(stage__in=Lead.CLOSED_STAGES)
        .order_by('-created_at')
        .first()
    )
    if lead is None:
        lead = Lead.objects.create(contact=contact, stage='Novo', source='WhatsApp', dependency_grade='I')
    body = data.get('body') or ''
    msg = WhatsAppMessage.objects.create(
        lead=lead, wa_from=wa_from, wa_to=whatsapp.normalize_phone(data.get('waTo')),
        direction='inbound', body=body, wa_msg_id=data.get('waMsgId', ''),
    )
    add_activity(lead, None, {'type': 'msg', 'title': 'Mensagem WhatsApp recebida',
                              'description': _preview(body)})
    logger.info('inbound whatsapp message stored for lead %s', lead.id)
    return msg


# ---------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------
def _pct(part: int, whole: int) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def report(*, days: int = 30, unitId: Optional[int] = None) -> dict:
    since = timezone.now() - timedelta(days=days)
    qs = Lead.objects.filter(created_at__gte=since)
    if unitId:
        qs = qs.filter(contact__unit_id=unitId)
    leads = list(qs.only('stage', 'source'))
    total = len(leads)
    stages = Counter(lead.stage for lead in leads)

    visited = sum(stages[s] for s in ('Visitou', 'Proposta', 'Fechado'))
    proposals = stages['Proposta'] + stages['Fechado']
    closed = stages['Fechado']

    sources = Counter(lead.source or 'Não informado' for lead in leads)
    recent = LeadActivity.objects.filter(created_at__gte=since, lead__in=qs).order_by('-created_at')[:10]
    return {
        'periodDays': days,
        'stageStats': [
            {'stage': s, 'count': stages[s], 'percentage': _pct(stages[s], total)} for s in Lead.STAGES
        ],
        'conversion': {
            'totalLeads': total,
            'visited': visited,
            'proposals': proposals,
            'closed': closed,
            'visitRate': _pct(visited, total),
            'proposalRate': _pct(proposals, visited),
            'closeRate': _pct(closed, proposals),
        },
        'topSources': [{'source': s, 'count': n} for s, n in sources.most_common()],
        'recentActivities': [serialize_activity(a) for a in recent],
        'periodSummary': {
            'newLeads': stages['Novo'],
            'closedDeals': closed,
            'lostDeals': stages['Perdido'],
            'inProgress': total - closed - stages['Perdido'],
        },
    }
