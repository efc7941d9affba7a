"""
Django admin registrations for the care models.

Superusers can review hospital registrations here as well as through
the API; the ``approve_hospitals`` action goes through the same
approval service so the hospital code and email are issued either way.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import (
    AdmittedPatient,
    AuditEvent,
    DispatchRequest,
    HospitalStaff,
    PatientGoal,
    Prescription,
    User,
)
from .services.accounts import approve_hospital


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ('username', 'display_name', 'role', 'status', 'hospital_code', 'is_staff')
    list_filter = ('role', 'status', 'is_staff')
    search_fields = ('username', 'email', 'display_name', 'hospital_code')
    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Jeevrakshak', {'fields': ('role', 'display_name', 'status', 'hospital_code', 'latitude', 'longitude', 'proof_url')}),
    )
    actions = ['approve_hospitals']

    @admin.action(description='Approve selected hospitals')
    def approve_hospitals(self, request, queryset):
        approved = 0
        for hospital in queryset.filter(role=User.ROLE_HOSPITAL):
            approve_hospital(request.user, hospital.pk)
            approved += 1
        self.message_user(request, f'{approved} hospital(s) approved.')


@admin.register(DispatchRequest)
class DispatchRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'request_type', 'patient_name', 'criticality', 'hospital_name', 'status', 'created_at')
    list_filter = ('request_type', 'criticality', 'status')
    search_fields = ('patient_name', 'hospital_name')


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient_name', 'hospital_name', 'doctor', 'needs_review', 'prescribed_at')
    list_filter = ('needs_review',)
    search_fields = ('patient_name', 'hospital_name', 'doctor')


@admin.register(AdmittedPatient)
class AdmittedPatientAdmin(admin.ModelAdmin):
    list_display = ('patient_code', 'name', 'age', 'ward', 'hospital', 'admitted_at')
    search_fields = ('patient_code', 'name', 'hospital__username')


@admin.register(HospitalStaff)
class HospitalStaffAdmin(admin.ModelAdmin):
    list_display = ('staff_code', 'name', 'role', 'department', 'hospital')
    list_filter = ('role',)
    search_fields = ('staff_code', 'name', 'hospital__username')


@admin.register(PatientGoal)
class PatientGoalAdmin(admin.ModelAdmin):
    list_display = ('patient', 'updated_at')
    search_fields = ('patient__username',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__username')
