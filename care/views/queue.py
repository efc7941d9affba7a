"""
Hospital queue endpoints.

A hospital only ever sees and resolves requests addressed to itself;
asking for someone else's request looks exactly like asking for one
that does not exist.
"""
from __future__ import annotations

from django.conf import settings
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.permissions import IsHospitalRole
from care.serializers.dispatch import ResolveRequestSerializer
from care.serializers.patient import PrescriptionOutSerializer
from care.services.queue import pending_queue, request_payload
from care.services.resolution import resolve_request


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def doctor_requests(request):
    native = getattr(settings, 'DISPATCH_QUEUE_NATIVE_SORT', True)
    queue = pending_queue(request.user, native=native)
    return Response([request_payload(req) for req in queue])


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def resolve_doctor_request(request, request_id):
    s = ResolveRequestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    prescription = resolve_request(
        hospital=request.user,
        request_id=request_id,
        prescription_text=s.validated_data['prescription'],
        doctor=s.validated_data.get('doctor'),
    )
    return Response({
        'ok': True,
        'message': 'Request resolved and prescription saved.',
        'prescription': PrescriptionOutSerializer(prescription).data,
    })
