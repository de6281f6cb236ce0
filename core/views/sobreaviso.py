"""
On-call list views, module ``sobreaviso``.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import SobreavisoEmployee
from ..permissions import HasModule
from ..serializers.sobreaviso import SobreavisoQuerySerializer, SobreavisoSerializer
from ..services.audit import log_action
from ..services.sobreaviso import filter_sobreaviso, serialize_sobreaviso


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasModule('sobreaviso')])
def sobreaviso_list(request):
    if request.method == 'GET':
        q = SobreavisoQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        return Response({'ok': True, 'data': [serialize_sobreaviso(e) for e in filter_sobreaviso(**q.validated_data)]})
    s = SobreavisoSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    entry = SobreavisoEmployee.objects.create(**s.to_model_fields())
    log_action(user=request.user, action='sobreaviso_create', object_type='sobreaviso', object_id=entry.id)
    return Response({'ok': True, 'data': serialize_sobreaviso(entry)}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, HasModule('sobreaviso')])
def sobreaviso_detail(request, pk: int):
    entry = get_object_or_404(SobreavisoEmployee, pk=pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_sobreaviso(entry)})
    if request.method in ('PUT', 'PATCH'):
        s = SobreavisoSerializer(entry, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        for attr, value in s.to_model_fields().items():
            setattr(entry, attr, value)
        entry.save()
        return Response({'ok': True, 'data': serialize_sobreaviso(entry)})
    eid = entry.id
    entry.delete()
    log_action(user=request.user, action='sobreaviso_delete', object_type='sobreaviso', object_id=eid)
    return Response(status=status.HTTP_204_NO_CONTENT)
