"""
Hospital-side patient records: admissions, staff rosters, direct
prescriptions; and patient-side goals.

Every lookup is scoped to the calling hospital (or patient) so one
account can never read or remove another's rows.
"""
from rest_framework.exceptions import NotFound

from care.models import AdmittedPatient, HospitalStaff, PatientGoal, Prescription
from care.services.audit import log_action
from care.services.resolution import hospital_display_name


def admit_patient(hospital, *, patient_code, name, age, ward='', initial_condition=''):
    patient = AdmittedPatient.objects.create(
        hospital=hospital,
        patient_code=patient_code,
        name=name,
        age=age,
        ward=ward,
        initial_condition=initial_condition,
    )
    log_action(user=hospital, action='patient_admit', object_type='admitted_patient', object_id=patient.id,
               detail={'patientCode': patient_code})
    return patient


def admitted_patients(hospital):
    return AdmittedPatient.objects.filter(hospital=hospital).order_by('-admitted_at', '-id')


def get_admitted_patient(hospital, patient_id) -> AdmittedPatient:
    patient = AdmittedPatient.objects.filter(pk=patient_id, hospital=hospital).first()
    if patient is None:
        raise NotFound('Patient not found.')
    return patient


def discharge_patient(hospital, patient_id) -> None:
    deleted, _ = AdmittedPatient.objects.filter(pk=patient_id, hospital=hospital).delete()
    if not deleted:
        raise NotFound('Patient not found or already removed.')
    log_action(user=hospital, action='patient_remove', object_type='admitted_patient', object_id=patient_id)


def prescriptions_for_name(patient_name):
    """Prescriptions are keyed by patient name, newest first."""
    return Prescription.objects.filter(patient_name=patient_name).order_by('-prescribed_at', '-id')


def prescribe(hospital, *, patient_id, patient_name, text, doctor=None) -> Prescription:
    """Record a prescription for one of the hospital's admitted patients."""
    patient = get_admitted_patient(hospital, patient_id)
    prescription = Prescription.objects.create(
        patient_name=patient_name,
        admitted_patient=patient,
        hospital=hospital,
        hospital_name=hospital_display_name(hospital),
        doctor=(doctor or '').strip() or Prescription.DEFAULT_DOCTOR,
        text=text,
    )
    log_action(user=hospital, action='prescribe', object_type='prescription', object_id=prescription.id,
               detail={'patientId': patient.id})
    return prescription


def add_staff(hospital, *, staff_code, name, role, department='', contact=''):
    member = HospitalStaff.objects.create(
        hospital=hospital, staff_code=staff_code, name=name, role=role, department=department, contact=contact,
    )
    log_action(user=hospital, action='staff_add', object_type='staff', object_id=member.id)
    return member


def staff_roster(hospital):
    return HospitalStaff.objects.filter(hospital=hospital).order_by('role', 'name', 'id')


def remove_staff(hospital, staff_id) -> None:
    deleted, _ = HospitalStaff.objects.filter(pk=staff_id, hospital=hospital).delete()
    if not deleted:
        raise NotFound('Staff member not found or already removed.')
    log_action(user=hospital, action='staff_remove', object_type='staff', object_id=staff_id)


def save_goals(patient, goals) -> PatientGoal:
    record, _ = PatientGoal.objects.update_or_create(patient=patient, defaults={'goals': list(goals)})
    return record
