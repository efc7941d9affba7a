import bleach
from rest_framework import serializers


def _clean(v):
    return bleach.clean((v or '').strip(), strip=True)


class SOSSerializer(serializers.Serializer):
    patientName = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    reason = serializers.CharField(max_length=2000, required=False, allow_blank=True, default='')
    # Coordinates are checked by the dispatch service so that a missing
    # location is reported the same way for every caller
    location = serializers.JSONField(required=False, allow_null=True)

    def validate_patientName(self, v):
        return _clean(v)

    def validate_reason(self, v):
        return _clean(v)


class DoctorConnectSerializer(SOSSerializer):
    criticality = serializers.CharField(max_length=16, required=False, allow_blank=True, allow_null=True)


class ResolveRequestSerializer(serializers.Serializer):
    prescription = serializers.CharField(max_length=5000, allow_blank=True)
    doctor = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
