"""
Resolving a queue entry into a prescription.

Writing the prescription and deleting the request happen in one
transaction, so a resolved request always has exactly one prescription
and a failed delete leaves neither behind.  ``flag_stale_prescriptions``
is the reconciliation sweep for rows written outside that path (manual
imports, restores) where a request outlived its prescription.
"""
from __future__ import annotations

import logging
import uuid
from datetime import timedelta

import bleach
from django.db import transaction
from django.utils import timezone

from care.exceptions import MalformedRequest, RequestNotFound
from care.models import DispatchRequest, Prescription, User
from care.services.audit import log_action
from care.services.notify import push_queue_event

logger = logging.getLogger(__name__)

UNKNOWN_HOSPITAL = 'Unknown Hospital'


def parse_request_id(value) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        logger.warning('Attempted resolution with invalid request id: %r', value)
        raise MalformedRequest('Invalid format for request ID.')


def hospital_display_name(hospital: User) -> str:
    """Registered name of a hospital, read from its account record."""
    row = (
        User.objects.filter(pk=hospital.pk, role=User.ROLE_HOSPITAL)
        .values('display_name', 'username')
        .first()
    )
    if not row:
        return UNKNOWN_HOSPITAL
    return row['display_name'] or row['username'] or UNKNOWN_HOSPITAL


def resolve_request(*, hospital: User, request_id, prescription_text: str, doctor: str | None = None) -> Prescription:
    """Issue a prescription for one of ``hospital``'s pending requests and remove it from the queue.

    Raises :class:`MalformedRequest` for a non-UUID id or empty text and
    :class:`RequestNotFound` when the request does not exist, was already
    resolved or belongs to another hospital.
    """
    request_uuid = parse_request_id(request_id)
    text = bleach.clean((prescription_text or '').strip(), strip=True)
    if not text:
        raise MalformedRequest('Prescription text is required.')
    doctor = bleach.clean((doctor or '').strip(), strip=True) or Prescription.DEFAULT_DOCTOR

    with transaction.atomic():
        pending = (
            DispatchRequest.objects.select_for_update()
            .filter(id=request_uuid, hospital=hospital, status=DispatchRequest.STATUS_PENDING)
            .first()
        )
        if pending is None:
            raise RequestNotFound()

        prescription = Prescription.objects.create(
            request_ref=pending.id,
            patient_name=pending.patient_name,
            hospital=hospital,
            hospital_name=hospital_display_name(hospital),
            doctor=doctor,
            text=text,
        )
        deleted, _ = DispatchRequest.objects.filter(id=pending.id, hospital=hospital).delete()
        if not deleted:
            raise RequestNotFound()

        log_action(
            user=hospital, action='request_resolve', object_type='dispatch_request', object_id=pending.id,
            detail={'prescriptionId': prescription.id},
        )

    logger.info('Hospital %s resolved request %s with prescription %s', hospital.id, request_uuid, prescription.id)
    transaction.on_commit(lambda: push_queue_event(hospital.id, 'queue.resolved', {'requestId': str(request_uuid)}))
    return prescription


def flag_stale_prescriptions(older_than: timedelta) -> int:
    """Mark prescriptions whose referenced request is still queued after ``older_than``.

    Returns the number of prescriptions newly flagged for manual review.
    """
    cutoff = timezone.now() - older_than
    still_queued = DispatchRequest.objects.filter(created_at__lte=cutoff).values('id')
    flagged = (
        Prescription.objects.filter(needs_review=False, request_ref__in=still_queued)
        .update(needs_review=True)
    )
    if flagged:
        logger.warning('Flagged %s prescription(s) whose request is still pending', flagged)
    return flagged
