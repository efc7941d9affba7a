import bleach
from rest_framework import serializers

from care.models import User


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()
    role = serializers.ChoiceField(choices=[r for r, _ in User.ROLE_CHOICES], required=False, allow_null=True)
    location = serializers.JSONField(required=False, allow_null=True)

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required.')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required.')
        return v


class PatientRegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(min_length=6, write_only=True)
    location = serializers.JSONField(required=False, allow_null=True)

    def validate_username(self, v):
        v = bleach.clean((v or '').strip(), strip=True)
        if not v:
            raise serializers.ValidationError('Username is required.')
        return v


class HospitalRegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(max_length=150)
    password = serializers.CharField(min_length=6, write_only=True)
    location = serializers.JSONField()
    proofUrl = serializers.URLField(max_length=500, required=False, allow_blank=True)

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), strip=True)
        if len(v) < 2:
            raise serializers.ValidationError('Hospital name must be at least 2 characters.')
        return v

    def validate_email(self, v):
        return v.strip().lower()
