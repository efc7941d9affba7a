"""
Database models for the Jeevrakshak backend.

Accounts (patients, hospitals and administrators) share a single user
table, mirroring how the mobile client treats them as one login
surface.  Dispatch requests are the hospital queue entries; they are
deleted once resolved into a :class:`Prescription`.
"""
from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Custom user model with a role, an optional location and approval state.

    A hospital is a user with role ``hospital``.  Hospitals register as
    ``PENDING`` and only become dispatch targets once an administrator
    approves them, which also issues the short ``hospital_code`` they can
    log in with.
    """
    ROLE_PATIENT = 'patient'
    ROLE_HOSPITAL = 'hospital'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = [
        (ROLE_PATIENT, 'Patient'),
        (ROLE_HOSPITAL, 'Hospital'),
        (ROLE_ADMIN, 'Administrator'),
    ]

    STATUS_PENDING = 'PENDING'
    STATUS_APPROVED = 'APPROVED'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
    ]

    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)
    display_name = models.CharField(max_length=255, blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    # Only meaningful for hospitals; patients and admins stay blank
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, blank=True, db_index=True)
    hospital_code = models.CharField(max_length=20, unique=True, null=True, blank=True)
    proof_url = models.URLField(max_length=500, blank=True)

    @property
    def is_hospital(self) -> bool:
        return self.role == self.ROLE_HOSPITAL

    @property
    def is_approved_hospital(self) -> bool:
        return self.is_hospital and self.status == self.STATUS_APPROVED

    @property
    def name_for_display(self) -> str:
        return self.display_name or self.username

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class DispatchRequest(models.Model):
    """A pending SOS or doctor-connect request routed to one hospital."""
    TYPE_SOS = 'SOS'
    TYPE_DOCTOR_CONNECT = 'DOCTOR_CONNECT'
    TYPE_CHOICES = [
        (TYPE_SOS, 'SOS'),
        (TYPE_DOCTOR_CONNECT, 'Doctor connect'),
    ]

    CRITICALITY_HIGH = 'HIGH'
    CRITICALITY_MEDIUM = 'MEDIUM'
    CRITICALITY_LOW = 'LOW'
    CRITICALITY_CHOICES = [
        (CRITICALITY_HIGH, 'High'),
        (CRITICALITY_MEDIUM, 'Medium'),
        (CRITICALITY_LOW, 'Low'),
    ]

    STATUS_PENDING = 'PENDING'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    request_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    patient_name = models.CharField(max_length=255, blank=True)
    reason = models.TextField(blank=True)
    criticality = models.CharField(max_length=10, choices=CRITICALITY_CHOICES, default=CRITICALITY_LOW)
    latitude = models.FloatField()
    longitude = models.FloatField()
    hospital = models.ForeignKey(User, on_delete=models.CASCADE, related_name='dispatch_requests')
    hospital_name = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        indexes = [
            models.Index(fields=['hospital', 'status', 'created_at'], name='care_dispatch_queue_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.request_type} {self.patient_name} -> {self.hospital_name} ({self.criticality})"


class Prescription(models.Model):
    """A prescription issued by a hospital, either on resolution or after admission."""
    DEFAULT_DOCTOR = 'Hospital Staff'

    patient_name = models.CharField(max_length=255, db_index=True)
    admitted_patient = models.ForeignKey(
        'AdmittedPatient', null=True, blank=True, on_delete=models.SET_NULL, related_name='prescriptions'
    )
    # Identifier of the dispatch request this prescription resolved, if any
    request_ref = models.UUIDField(null=True, blank=True, db_index=True)
    hospital = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='issued_prescriptions'
    )
    hospital_name = models.CharField(max_length=255)
    doctor = models.CharField(max_length=255, default=DEFAULT_DOCTOR)
    text = models.TextField()
    needs_review = models.BooleanField(default=False)
    prescribed_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self) -> str:
        return f"Prescription for {self.patient_name} by {self.hospital_name}"


class AdmittedPatient(models.Model):
    """A patient admitted to a hospital ward."""
    hospital = models.ForeignKey(User, on_delete=models.CASCADE, related_name='admitted_patients')
    patient_code = models.CharField(max_length=64, help_text="Hospital-assigned patient identifier")
    name = models.CharField(max_length=255)
    age = models.PositiveIntegerField()
    ward = models.CharField(max_length=100, blank=True)
    initial_condition = models.TextField(blank=True)
    admitted_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=['hospital', 'admitted_at'], name='care_admitted_hosp_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.patient_code})"


class HospitalStaff(models.Model):
    hospital = models.ForeignKey(User, on_delete=models.CASCADE, related_name='staff_members')
    staff_code = models.CharField(max_length=64)
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=100)
    department = models.CharField(max_length=100, blank=True)
    contact = models.CharField(max_length=100, blank=True)
    added_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.role})"


class PatientGoal(models.Model):
    """Health goals saved by a patient; one record per patient."""
    patient = models.OneToOneField(User, on_delete=models.CASCADE, related_name='goal_record')
    goals = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Goals of {self.patient.username}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='care_audit_action_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='care_audit_object_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
