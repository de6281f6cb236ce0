"""
Talent bank views (module ``talent-bank``) and the public registration form.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..models import Candidate, CandidateActivity
from ..permissions import HasModule
from ..serializers.crm import MoveSerializer
from ..serializers.talent_bank import (
    CandidateActivitySerializer,
    CandidateFilterSerializer,
    CandidateSerializer,
    PublicCandidateSerializer,
)
from ..services import talent_bank as svc
from ..services.audit import log_action
from ..throttles import PublicCandidateThrottle

TALENT_ACCESS = [IsAuthenticated, HasModule('talent-bank')]


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([PublicCandidateThrottle])
def public_candidate_register(request):
    s = PublicCandidateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    candidate = svc.register_public_candidate(s.validated_data)
    return Response({'ok': True, 'data': {'id': candidate.id}}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes(TALENT_ACCESS)
def candidates_list(request):
    if request.method == 'GET':
        f = CandidateFilterSerializer(data=request.query_params)
        f.is_valid(raise_exception=True)
        qs = svc.filter_candidates(**f.validated_data)
        return Response({'ok': True, 'data': [svc.serialize_candidate(c) for c in qs]})
    s = CandidateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    candidate = svc.create_candidate(request.user, s.to_model_fields())
    return Response({'ok': True, 'data': svc.serialize_candidate(candidate)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes(TALENT_ACCESS)
def candidate_detail(request, pk: int):
    candidate = get_object_or_404(Candidate, pk=pk)
    if request.method == 'GET':
        data = svc.serialize_candidate(candidate)
        data['activities'] = [svc.serialize_activity(a) for a in candidate.activities.order_by('-created_at')]
        return Response({'ok': True, 'data': data})
    if request.method == 'PUT':
        s = CandidateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        svc.update_candidate(candidate, request.user, s.to_model_fields())
        return Response({'ok': True, 'data': svc.serialize_candidate(candidate)})
    cid = candidate.id
    candidate.delete()
    log_action(user=request.user, action='candidate_delete', object_type='candidate', object_id=cid)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes(TALENT_ACCESS)
def talent_board(request):
    return Response({'ok': True, 'data': svc.board()})


@api_view(['POST'])
@permission_classes(TALENT_ACCESS)
def candidate_move(request, pk: int):
    candidate = get_object_or_404(Candidate, pk=pk)
    s = MoveSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    bad = {k: f'Status inválido: {v}' for k, v in s.validated_data.items() if v not in Candidate.STATUSES}
    if bad:
        raise ValidationError(bad)
    svc.move_candidate(candidate, s.validated_data['fromStage'], s.validated_data['toStage'], actor=request.user)
    return Response({'ok': True, 'data': svc.serialize_candidate(candidate)})


@api_view(['GET', 'POST'])
@permission_classes(TALENT_ACCESS)
def candidate_activities(request, pk: int):
    candidate = get_object_or_404(Candidate, pk=pk)
    if request.method == 'GET':
        qs = candidate.activities.order_by('-created_at')
        return Response({'ok': True, 'data': [svc.serialize_activity(a) for a in qs]})
    s = CandidateActivitySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    activity = svc.add_activity(candidate, request.user, s.validated_data)
    return Response({'ok': True, 'data': svc.serialize_activity(activity)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(TALENT_ACCESS)
def activity_complete(request, pk: int):
    activity = get_object_or_404(CandidateActivity, pk=pk)
    svc.complete_activity(activity)
    return Response({'ok': True, 'data': svc.serialize_activity(activity)})


@api_view(['GET'])
@permission_classes(TALENT_ACCESS)
def talent_stats(request):
    return Response({'ok': True, 'data': svc.stats()})
