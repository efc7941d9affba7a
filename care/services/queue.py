"""
Per-hospital queue of pending dispatch requests.

Ordering: criticality descending (HIGH, MEDIUM, LOW, then anything
unrecognised), then oldest first, then id.  ``queue_sort_key`` is the
reference comparator; the database ordering in ``pending_queue``
must produce the same sequence.
"""
from __future__ import annotations

from django.db.models import Case, IntegerField, Value, When

from care.models import DispatchRequest, User

CRITICALITY_RANK = {
    DispatchRequest.CRITICALITY_HIGH: 3,
    DispatchRequest.CRITICALITY_MEDIUM: 2,
    DispatchRequest.CRITICALITY_LOW: 1,
}


def criticality_rank(criticality) -> int:
    return CRITICALITY_RANK.get(criticality, 0)


def queue_sort_key(req: DispatchRequest):
    return (-criticality_rank(req.criticality), req.created_at, req.id.hex)


def sort_queue(requests) -> list[DispatchRequest]:
    return sorted(requests, key=queue_sort_key)


def _rank_expression():
    return Case(
        *[When(criticality=name, then=Value(rank)) for name, rank in CRITICALITY_RANK.items()],
        default=Value(0),
        output_field=IntegerField(),
    )


def pending_queue(hospital: User, *, native: bool = True) -> list[DispatchRequest]:
    """Return the hospital's pending requests, highest priority first."""
    qs = DispatchRequest.objects.filter(hospital=hospital, status=DispatchRequest.STATUS_PENDING)
    if native:
        qs = qs.annotate(criticality_rank=_rank_expression()).order_by('-criticality_rank', 'created_at', 'id')
        return list(qs)
    return sort_queue(qs)


def request_payload(req: DispatchRequest) -> dict:
    return {
        'id': str(req.id),
        'type': req.request_type,
        'patientName': req.patient_name,
        'reason': req.reason,
        'criticality': req.criticality,
        'location': {'lat': req.latitude, 'lng': req.longitude},
        'hospitalId': req.hospital_id,
        'hospitalName': req.hospital_name,
        'status': req.status,
        'timestamp': req.created_at.isoformat(),
    }
