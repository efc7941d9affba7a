"""
Account registration and hospital approval.
"""
from __future__ import annotations

import logging
import secrets

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from rest_framework.exceptions import NotFound

from care.exceptions import AccountExists
from care.models import User
from care.services.audit import log_action

logger = logging.getLogger(__name__)


def generate_hospital_code() -> str:
    """Return an unused ``HSP-NNNNNN`` code."""
    while True:
        code = f"HSP-{100000 + secrets.randbelow(900000)}"
        if not User.objects.filter(hospital_code=code).exists():
            return code


def register_patient(*, username: str, password: str, lat=None, lng=None) -> User:
    if User.objects.filter(username=username).exists():
        raise AccountExists('Username already exists.')
    user = User.objects.create_user(
        username=username,
        password=password,
        role=User.ROLE_PATIENT,
        latitude=lat,
        longitude=lng,
    )
    log_action(user=user, action='register_patient', object_type='user', object_id=user.id)
    return user


def register_hospital(*, name: str, email: str, password: str, lat=None, lng=None, proof_url: str = '') -> User:
    """Create a hospital account awaiting admin approval."""
    if User.objects.filter(email__iexact=email).exists() or User.objects.filter(username=email).exists():
        raise AccountExists('Hospital already registered with this email.')
    hospital = User.objects.create_user(
        username=email,
        email=email,
        password=password,
        role=User.ROLE_HOSPITAL,
        display_name=name,
        latitude=lat,
        longitude=lng,
        proof_url=proof_url or '',
        status=User.STATUS_PENDING,
    )
    logger.info('Hospital %s registered, pending approval', hospital.id)
    log_action(user=hospital, action='register_hospital', object_type='user', object_id=hospital.id)
    return hospital


def send_hospital_approval_email(hospital: User) -> None:
    if not hospital.email:
        return
    message = f"""
Congratulations!

Your hospital has been verified and approved.

Hospital ID: {hospital.hospital_code}

Use this Hospital ID to log in. If you were given a temporary password during
registration, use that to sign in and then change it in the profile.

- Jeevrakshak Team
"""
    html_message = f"""
<h2>Congratulations!</h2>
<p>Your hospital has been verified and approved.</p>
<p>Hospital ID: <strong>{hospital.hospital_code}</strong></p>
<p>Use this Hospital ID to log in.</p>
<p>- Jeevrakshak Team</p>
"""
    sent = send_mail(
        subject="Your Hospital Has Been Approved",
        message=message,
        html_message=html_message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[hospital.email],
        fail_silently=True,
    )
    if not sent:
        logger.error('Approval email to hospital %s was not delivered', hospital.id)


def approve_hospital(admin: User, hospital_id) -> User:
    """Approve a pending hospital, issue its hospital code and notify it by email."""
    with transaction.atomic():
        hospital = (
            User.objects.select_for_update()
            .filter(pk=hospital_id, role=User.ROLE_HOSPITAL)
            .first()
        )
        if hospital is None:
            raise NotFound('Hospital not found.')
        if hospital.status != User.STATUS_APPROVED or not hospital.hospital_code:
            hospital.hospital_code = hospital.hospital_code or generate_hospital_code()
            hospital.status = User.STATUS_APPROVED
            hospital.save(update_fields=['status', 'hospital_code'])
        log_action(user=admin, action='approve_hospital', object_type='user', object_id=hospital.id,
                   detail={'hospitalCode': hospital.hospital_code})

    logger.info('Hospital %s approved as %s', hospital.id, hospital.hospital_code)
    send_hospital_approval_email(hospital)
    return hospital
