"""
Dispatch routing: turn an SOS or doctor-connect submission into a
pending request addressed to the nearest approved hospital.

Both entry points are reachable without authentication so that a
patient in distress can reach a hospital before logging in.
"""
from __future__ import annotations

import logging
import math
from typing import NamedTuple

from django.db import transaction

from care.exceptions import MalformedRequest, NoOperationalHospital
from care.models import DispatchRequest
from care.services.audit import log_action
from care.services.locator import find_nearest_hospital
from care.services.notify import push_queue_event
from care.services.queue import request_payload

logger = logging.getLogger(__name__)

SOS_PREFIX = '\U0001F6A8 SOS Alert: '


class DispatchResult(NamedTuple):
    request: DispatchRequest
    hospital_name: str
    distance: float


def parse_location(location, purpose: str = 'dispatch') -> tuple[float, float]:
    """Return ``(lat, lng)`` from a ``{"lat": .., "lng": ..}`` mapping.

    Zero is a valid coordinate; missing, null, non-numeric or non-finite
    values are not.
    """
    message = f'Location is required for {purpose}.'
    if not isinstance(location, dict):
        raise MalformedRequest(message)
    lat = location.get('lat')
    lng = location.get('lng')
    if lat is None or lng is None or lat == '' or lng == '':
        raise MalformedRequest(message)
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError):
        raise MalformedRequest(message)
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise MalformedRequest(message)
    return lat, lng


def normalize_criticality(value) -> str:
    """Uppercase a caller-supplied criticality; anything unknown becomes LOW."""
    if not isinstance(value, str):
        return DispatchRequest.CRITICALITY_LOW
    value = value.strip().upper()
    if value in dict(DispatchRequest.CRITICALITY_CHOICES):
        return value
    return DispatchRequest.CRITICALITY_LOW


def _dispatch(*, request_type: str, patient_name: str, reason: str, criticality: str, lat: float, lng: float) -> DispatchResult:
    nearest = find_nearest_hospital(lat, lng)
    if nearest is None:
        logger.warning('No operational hospital for %s at (%s, %s)', request_type, lat, lng)
        raise NoOperationalHospital()

    hospital = nearest.hospital
    hospital_name = hospital.name_for_display
    req = DispatchRequest.objects.create(
        request_type=request_type,
        patient_name=patient_name,
        reason=reason,
        criticality=criticality,
        latitude=lat,
        longitude=lng,
        hospital=hospital,
        hospital_name=hospital_name,
        status=DispatchRequest.STATUS_PENDING,
    )
    logger.info(
        'Dispatched %s %s (%s) to hospital %s at %.2f km',
        request_type, req.id, criticality, hospital.id, nearest.distance,
    )
    log_action(
        user=None, action=f'dispatch_{request_type.lower()}', object_type='dispatch_request', object_id=req.id,
        detail={'hospitalId': hospital.id, 'criticality': criticality, 'distanceKm': round(nearest.distance, 3)},
    )
    payload = {'request': request_payload(req)}
    transaction.on_commit(lambda: push_queue_event(hospital.id, 'queue.request', payload))
    return DispatchResult(req, hospital_name, nearest.distance)


def dispatch_emergency(*, patient_name: str, reason: str, location) -> DispatchResult:
    """Route an SOS to the nearest hospital.  Criticality is always HIGH."""
    lat, lng = parse_location(location, 'SOS dispatch')
    return _dispatch(
        request_type=DispatchRequest.TYPE_SOS,
        patient_name=patient_name,
        reason=f'{SOS_PREFIX}{reason}',
        criticality=DispatchRequest.CRITICALITY_HIGH,
        lat=lat,
        lng=lng,
    )


def dispatch_doctor_connect(*, patient_name: str, reason: str, criticality=None, location) -> DispatchResult:
    """Route a doctor-connect request to the nearest hospital."""
    lat, lng = parse_location(location, 'doctor connection')
    return _dispatch(
        request_type=DispatchRequest.TYPE_DOCTOR_CONNECT,
        patient_name=patient_name,
        reason=reason,
        criticality=normalize_criticality(criticality),
        lat=lat,
        lng=lng,
    )
