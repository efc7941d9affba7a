"""
Endpoints a logged-in patient uses for their own data.

Records are keyed by patient name (the username), and a patient may
only ask for their own.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.models import PatientGoal
from care.permissions import IsPatientRole
from care.serializers.patient import GoalsSerializer, PrescriptionOutSerializer
from care.services.patients import prescriptions_for_name, save_goals


def _ensure_own_name(user, patient_name):
    if patient_name != user.username:
        raise PermissionDenied("Access denied to other patient's data.")


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsPatientRole])
def update_goals(request):
    s = GoalsSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    save_goals(request.user, s.validated_data['goals'])
    return Response({'ok': True, 'message': 'Goals updated successfully.'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def get_goals(request, patient_name):
    _ensure_own_name(request.user, patient_name)
    record = PatientGoal.objects.filter(patient=request.user).first()
    if record is None:
        raise NotFound('No goals found for this patient.')
    return Response(record.goals)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def my_prescriptions(request, patient_name):
    _ensure_own_name(request.user, patient_name)
    return Response(PrescriptionOutSerializer(prescriptions_for_name(patient_name), many=True).data)
