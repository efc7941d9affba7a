import bleach
from rest_framework import serializers

from care.models import AdmittedPatient, HospitalStaff, Prescription


def _clean(v):
    return bleach.clean((v or '').strip(), strip=True)


class AdmitPatientSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, max_value=150)
    ward = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    initialCondition = serializers.CharField(max_length=2000, required=False, allow_blank=True, default='')

    def validate_name(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Name is required.')
        return v

    def validate_ward(self, v):
        return _clean(v)

    def validate_initialCondition(self, v):
        return _clean(v)


class StaffCreateSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255)
    role = serializers.CharField(max_length=100)
    department = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    contact = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')

    def validate_name(self, v):
        return _clean(v)

    def validate_role(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Role is required.')
        return v


class PrescribeSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    patientName = serializers.CharField(max_length=255)
    prescriptionText = serializers.CharField(max_length=5000)
    doctorName = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)

    def validate_prescriptionText(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Prescription text is required.')
        return v

    def validate_doctorName(self, v):
        return _clean(v)


class GoalsSerializer(serializers.Serializer):
    goals = serializers.ListField(child=serializers.CharField(max_length=500), allow_empty=True)

    def validate_goals(self, v):
        return [_clean(g) for g in v]


class PrescriptionOutSerializer(serializers.ModelSerializer):
    patientName = serializers.CharField(source='patient_name')
    patientId = serializers.IntegerField(source='admitted_patient_id')
    requestId = serializers.UUIDField(source='request_ref')
    hospitalId = serializers.IntegerField(source='hospital_id')
    hospitalName = serializers.CharField(source='hospital_name')
    prescription = serializers.CharField(source='text')
    needsReview = serializers.BooleanField(source='needs_review')
    prescribedAt = serializers.DateTimeField(source='prescribed_at')

    class Meta:
        model = Prescription
        fields = [
            'id', 'patientName', 'patientId', 'requestId', 'hospitalId', 'hospitalName',
            'doctor', 'prescription', 'needsReview', 'prescribedAt',
        ]


class AdmittedPatientOutSerializer(serializers.ModelSerializer):
    patientCode = serializers.CharField(source='patient_code')
    initialCondition = serializers.CharField(source='initial_condition')
    hospitalId = serializers.IntegerField(source='hospital_id')
    admittedAt = serializers.DateTimeField(source='admitted_at')

    class Meta:
        model = AdmittedPatient
        fields = ['id', 'patientCode', 'name', 'age', 'ward', 'initialCondition', 'hospitalId', 'admittedAt']


class StaffOutSerializer(serializers.ModelSerializer):
    staffCode = serializers.CharField(source='staff_code')
    hospitalId = serializers.IntegerField(source='hospital_id')
    addedAt = serializers.DateTimeField(source='added_at')

    class Meta:
        model = HospitalStaff
        fields = ['id', 'staffCode', 'name', 'role', 'department', 'contact', 'hospitalId', 'addedAt']
