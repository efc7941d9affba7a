"""
URL mappings for the Jeevrakshak API.

Paths match the mobile and web clients exactly; trailing slashes are
deliberately omitted (``APPEND_SLASH = False``).
"""
from django.urls import path, include

from .auth_views import (
    jwt_logout_view,
    jwt_refresh_view,
    login_view,
    register_hospital_view,
    register_patient_view,
)
from .views import dispatch, health, hospitals, patient_self, patients, queue, staff

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Accounts
    path('api/register/patient', register_patient_view, name='register_patient'),
    path('api/register/hospital', register_hospital_view, name='register_hospital'),
    path('api/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),

    # Admin approval
    path('api/hospitals/pending', hospitals.pending_hospitals, name='pending_hospitals'),
    path('api/hospital/approve/<int:hospital_id>', hospitals.approve, name='approve_hospital'),

    # Open dispatch
    path('api/sos', dispatch.sos, name='sos'),
    path('api/doctor-request', dispatch.doctor_request, name='doctor_request'),

    # Hospital queue
    path('api/doctor-requests', queue.doctor_requests, name='doctor_requests'),
    path('api/doctor-request/<str:request_id>/resolve', queue.resolve_doctor_request, name='resolve_request'),

    # Admissions and prescriptions
    path('api/admit-patient', patients.admit, name='admit_patient'),
    path('api/patients', patients.list_patients, name='list_patients'),
    path('api/patients/<int:patient_id>', patients.delete_patient, name='delete_patient'),
    path('api/patients/<int:patient_id>/details', patients.patient_details, name='patient_details'),
    path('api/prescribe', patients.prescribe_patient, name='prescribe'),

    # Staff
    path('api/staff', staff.staff, name='staff'),
    path('api/staff/<int:staff_id>', staff.delete_staff, name='delete_staff'),

    # Patient self-service
    path('api/goals', patient_self.update_goals, name='update_goals'),
    path('api/goals/<str:patient_name>', patient_self.get_goals, name='get_goals'),
    path('api/prescriptions/<str:patient_name>', patient_self.my_prescriptions, name='my_prescriptions'),
]
