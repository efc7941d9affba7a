"""
Nearest approved hospital lookup.

A full linear scan on every call.  That is fine for the expected
number of hospitals; a geohash/R-tree index can replace the scan
without changing ``find_nearest_hospital``'s contract.
"""
from __future__ import annotations

import math
from typing import Iterable, NamedTuple, Optional

from care.models import User
from care.services.geo import haversine_km


class NearestHospital(NamedTuple):
    hospital: User
    distance: float


def approved_hospitals():
    """Hospitals eligible as dispatch targets, in primary-key order."""
    return (
        User.objects.filter(
            role=User.ROLE_HOSPITAL,
            status=User.STATUS_APPROVED,
            latitude__isnull=False,
            longitude__isnull=False,
        )
        .order_by('id')
    )


def find_nearest_hospital(lat: float, lng: float, hospitals: Optional[Iterable[User]] = None) -> Optional[NearestHospital]:
    """Return the hospital closest to ``(lat, lng)`` and its distance in km.

    The first hospital encountered wins a tie.  Returns ``None`` when no
    approved hospital has a location.
    """
    if hospitals is None:
        hospitals = approved_hospitals()

    nearest = None
    min_distance = math.inf
    for hospital in hospitals:
        if hospital.status != User.STATUS_APPROVED:
            continue
        if hospital.latitude is None or hospital.longitude is None:
            continue
        distance = haversine_km(lat, lng, hospital.latitude, hospital.longitude)
        if distance < min_distance:
            min_distance = distance
            nearest = hospital

    if nearest is None:
        return None
    return NearestHospital(nearest, min_distance)
