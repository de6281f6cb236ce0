"""
Electronic medical record views, module ``prontuario``.

Writing is further restricted by the position of the professional (see
``core.services.prontuario``); reading is open to every position.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Guest, MedicalRecord
from ..permissions import HasModule
from ..serializers.prontuario import (
    MedicalRecordSerializer,
    MedicalRecordUpdateSerializer,
    RecordFilterSerializer,
    SignSerializer,
)
from ..services import prontuario as svc

RECORDS_ACCESS = [IsAuthenticated, HasModule('prontuario')]


@api_view(['GET'])
@permission_classes(RECORDS_ACCESS)
def my_record_permissions(request):
    return Response({'ok': True, 'data': svc.permissions_for(request.user)})


@api_view(['GET', 'POST'])
@permission_classes(RECORDS_ACCESS)
def guest_records(request, guest_id: int):
    guest = get_object_or_404(Guest, pk=guest_id)
    if request.method == 'GET':
        f = RecordFilterSerializer(data=request.query_params)
        f.is_valid(raise_exception=True)
        qs = svc.filter_records(guest, **f.validated_data)
        return Response({'ok': True, 'data': [svc.serialize_record(r) for r in qs]})
    s = MedicalRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = svc.create_record(guest, request.user, s.validated_data)
    return Response({'ok': True, 'data': svc.serialize_record(record)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes(RECORDS_ACCESS)
def guest_records_summary(request, guest_id: int):
    guest = get_object_or_404(Guest, pk=guest_id)
    f = RecordFilterSerializer(data=request.query_params)
    f.is_valid(raise_exception=True)
    summary = svc.summarize(svc.filter_records(guest, **f.validated_data))
    return Response({'ok': True, 'data': {'guestId': guest.id, 'guestName': guest.full_name, **summary}})


@api_view(['GET', 'PUT'])
@permission_classes(RECORDS_ACCESS)
def record_detail(request, pk: int):
    record = get_object_or_404(MedicalRecord.objects.select_related('guest'), pk=pk)
    if request.method == 'GET':
        data = svc.serialize_record(record)
        data['signatureValid'] = svc.verify_signature(record) if record.signature else None
        return Response({'ok': True, 'data': data})
    s = MedicalRecordUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    svc.update_record(record, request.user, s.validated_data)
    return Response({'ok': True, 'data': svc.serialize_record(record)})


@api_view(['POST'])
@permission_classes(RECORDS_ACCESS)
def record_sign(request, pk: int):
    record = get_object_or_404(MedicalRecord.objects.select_related('guest'), pk=pk)
    s = SignSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    svc.sign_record(record, request.user, s.validated_data)
    return Response({'ok': True, 'data': svc.serialize_record(record)})
