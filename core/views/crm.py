"""
CRM views: leads (``crm-leads``), board (``crm-pipeline``), WhatsApp inbox
(``crm-inbox``) and reports (``crm-reports``).
"""
from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..models import Lead, LeadActivity, Unit
from ..permissions import HasModule
from ..serializers.crm import (
    InboundMessageSerializer,
    LeadActivitySerializer,
    LeadFilterSerializer,
    LeadSerializer,
    MoveSerializer,
    ReportQuerySerializer,
    SendMessageSerializer,
)
from ..services import crm as svc
from ..services.audit import log_action
from ..services.whatsapp import token_is_valid
from ..throttles import WhatsAppWebhookThrottle

logger = logging.getLogger(__name__)


def _check_stages(data: dict, stages: list) -> None:
    errors = {k: f'Etapa inválida: {data[k]}' for k in ('fromStage', 'toStage') if data[k] not in stages}
    if errors:
        raise ValidationError(errors)


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasModule('crm-leads')])
def units_list(request):
    return Response({'ok': True, 'data': [svc.serialize_unit(u) for u in Unit.objects.order_by('name')]})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasModule('crm-leads')])
def leads_list(request):
    if request.method == 'GET':
        f = LeadFilterSerializer(data=request.query_params)
        f.is_valid(raise_exception=True)
        return Response({'ok': True, 'data': [svc.serialize_lead(l) for l in svc.filter_leads(**f.validated_data)]})
    s = LeadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    lead = svc.create_lead(request.user, s.validated_data)
    return Response({'ok': True, 'data': svc.serialize_lead(lead)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, HasModule('crm-leads')])
def lead_detail(request, pk: int):
    lead = get_object_or_404(Lead.objects.select_related('contact', 'owner'), pk=pk)
    if request.method == 'GET':
        data = svc.serialize_lead(lead)
        data['activities'] = [svc.serialize_activity(a) for a in lead.activities.order_by('-created_at')]
        return Response({'ok': True, 'data': data})
    if request.method == 'PUT':
        s = LeadSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        svc.update_lead(lead, request.user, s.validated_data)
        return Response({'ok': True, 'data': svc.serialize_lead(lead)})
    lid = lead.id
    lead.delete()
    log_action(user=request.user, action='lead_delete', object_type='lead', object_id=lid)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasModule('crm-pipeline')])
def pipeline_board(request):
    return Response({'ok': True, 'data': svc.board()})


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasModule('crm-pipeline')])
def lead_move(request, pk: int):
    lead = get_object_or_404(Lead.objects.select_related('contact', 'owner'), pk=pk)
    s = MoveSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    _check_stages(s.validated_data, Lead.STAGES)
    svc.move_lead(lead, s.validated_data['fromStage'], s.validated_data['toStage'], actor=request.user)
    return Response({'ok': True, 'data': svc.serialize_lead(lead)})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasModule('crm-leads')])
def lead_activities(request, pk: int):
    lead = get_object_or_404(Lead, pk=pk)
    if request.method == 'GET':
        qs = lead.activities.order_by('-created_at')
        return Response({'ok': True, 'data': [svc.serialize_activity(a) for a in qs]})
    s = LeadActivitySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    activity = svc.add_activity(lead, request.user, s.validated_data)
    return Response({'ok': True, 'data': svc.serialize_activity(activity)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasModule('crm-leads')])
def activity_toggle(request, pk: int):
    activity = get_object_or_404(LeadActivity, pk=pk)
    svc.toggle_activity(activity)
    return Response({'ok': True, 'data': svc.serialize_activity(activity)})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasModule('crm-inbox')])
def lead_messages(request, pk: int):
    lead = get_object_or_404(Lead.objects.select_related('contact'), pk=pk)
    if request.method == 'GET':
        qs = lead.messages.order_by('created_at')
        return Response({'ok': True, 'data': [svc.serialize_message(m) for m in qs]})
    s = SendMessageSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    msg = svc.send_lead_message(lead, request.user, s.validated_data['body'])
    return Response({'ok': True, 'data': svc.serialize_message(msg)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([WhatsAppWebhookThrottle])
def whatsapp_webhook(request):
    """Inbound messages pushed by the WhatsApp bot (bearer token protected)."""
    if not token_is_valid(request.META.get('HTTP_AUTHORIZATION')):
        logger.warning('whatsapp webhook rejected from %s', request.META.get('REMOTE_ADDR'))
        return Response({'ok': False, 'error': {'code': 'unauthorized', 'message': 'Token inválido'}},
                        status=status.HTTP_401_UNAUTHORIZED)
    s = InboundMessageSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    msg = svc.receive_inbound(s.validated_data)
    return Response({'ok': True, 'data': {'leadId': msg.lead_id, 'messageId': msg.id}})


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasModule('crm-reports')])
def crm_reports(request):
    q = ReportQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response({'ok': True, 'data': svc.report(**q.validated_data)})
