"""
Admitted patient endpoints for hospitals.

Hospitals admit patients to a ward, list and discharge them, view a
patient together with every prescription issued under their name, and
write prescriptions directly for a patient after admission.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.serializers.patient import (
    AdmitPatientSerializer,
    AdmittedPatientOutSerializer,
    PrescribeSerializer,
    PrescriptionOutSerializer,
)
from care.services.patients import (
    admit_patient,
    admitted_patients,
    discharge_patient,
    get_admitted_patient,
    prescribe,
    prescriptions_for_name,
)

from ..permissions import IsHospitalRole


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def admit(request):
    s = AdmitPatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    patient = admit_patient(
        request.user,
        patient_code=vd['id'],
        name=vd['name'],
        age=vd['age'],
        ward=vd['ward'],
        initial_condition=vd['initialCondition'],
    )
    return Response({
        'ok': True,
        'message': 'Patient admitted successfully.',
        'patient': AdmittedPatientOutSerializer(patient).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def list_patients(request):
    """Patients admitted to the calling hospital, most recent first."""
    return Response(AdmittedPatientOutSerializer(admitted_patients(request.user), many=True).data)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def delete_patient(request, patient_id):
    discharge_patient(request.user, patient_id)
    return Response({'ok': True, 'message': 'Patient record removed successfully.'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def patient_details(request, patient_id):
    """Patient record merged with its prescriptions.

    Prescriptions are matched on the patient's name, which also picks up
    prescriptions written when the patient came in through the request
    queue before admission.
    """
    patient = get_admitted_patient(request.user, patient_id)
    data = dict(AdmittedPatientOutSerializer(patient).data)
    data['prescriptions'] = PrescriptionOutSerializer(prescriptions_for_name(patient.name), many=True).data
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def prescribe_patient(request):
    s = PrescribeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    prescription = prescribe(
        request.user,
        patient_id=vd['patientId'],
        patient_name=vd['patientName'],
        text=vd['prescriptionText'],
        doctor=vd.get('doctorName'),
    )
    return Response({
        'ok': True,
        'message': 'Prescription saved successfully.',
        'prescription': PrescriptionOutSerializer(prescription).data,
    }, status=status.HTTP_201_CREATED)
