"""
Guest (resident) management views, module ``guests``.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Guest
from ..permissions import HasModule
from ..serializers.guests import GuestListQuerySerializer, GuestSerializer
from ..services.audit import log_action
from ..services.guests import filter_guests, serialize_guest


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasModule('guests')])
def guests_list(request):
    if request.method == 'GET':
        q = GuestListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = filter_guests(**q.validated_data)
        return Response({'ok': True, 'data': [serialize_guest(g) for g in qs]})
    s = GuestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    guest = Guest.objects.create(**s.to_model_fields())
    log_action(user=request.user, action='guest_create', object_type='guest', object_id=guest.id)
    return Response({'ok': True, 'data': serialize_guest(guest)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, HasModule('guests')])
def guest_detail(request, pk: int):
    guest = get_object_or_404(Guest, pk=pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_guest(guest)})
    if request.method in ('PUT', 'PATCH'):
        s = GuestSerializer(guest, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        fields = s.to_model_fields()
        for attr, value in fields.items():
            setattr(guest, attr, value)
        guest.save()
        log_action(user=request.user, action='guest_update', object_type='guest', object_id=guest.id,
                   detail={'fields': sorted(fields)})
        return Response({'ok': True, 'data': serialize_guest(guest)})
    gid = guest.id
    guest.delete()
    log_action(user=request.user, action='guest_delete', object_type='guest', object_id=gid)
    return Response(status=status.HTTP_204_NO_CONTENT)
