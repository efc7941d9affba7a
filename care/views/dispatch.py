"""
Open dispatch endpoints: emergency SOS and doctor-connect.

Neither requires a login.  Both route the request to the nearest
approved hospital and answer with where it went.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle

from care.serializers.dispatch import DoctorConnectSerializer, SOSSerializer
from care.services.dispatch import DispatchResult, dispatch_doctor_connect, dispatch_emergency
from care.throttles import DispatchRateThrottle


def _dispatched(result: DispatchResult, message: str) -> Response:
    return Response({
        'ok': True,
        'message': message,
        'requestId': str(result.request.id),
        'hospitalName': result.hospital_name,
        'distanceKm': round(result.distance, 2),
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle, UserRateThrottle, DispatchRateThrottle])
def sos(request):
    s = SOSSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    result = dispatch_emergency(
        patient_name=vd['patientName'],
        reason=vd['reason'],
        location=vd.get('location'),
    )
    return _dispatched(result, f'SOS sent to {result.hospital_name}.')


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle, UserRateThrottle, DispatchRateThrottle])
def doctor_request(request):
    s = DoctorConnectSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    result = dispatch_doctor_connect(
        patient_name=vd['patientName'],
        reason=vd['reason'],
        criticality=vd.get('criticality'),
        location=vd.get('location'),
    )
    return _dispatched(result, f'Doctor request sent to {result.hospital_name}.')
