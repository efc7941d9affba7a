"""
Great-circle distance between two coordinates.

This is "as the crow flies" distance, not road distance.
"""
import math

EARTH_RADIUS_KM = 6371


def haversine_km(lat1, lng1, lat2, lng2) -> float:
    """
    Distance in kilometres between two (latitude, longitude) points in degrees.

    Inputs are not bounds-checked.  NaN or infinity in any coordinate
    yields NaN.
    """
    if not all(math.isfinite(v) for v in (lat1, lng1, lat2, lng2)):
        return math.nan
    lat1, lng1, lat2, lng2 = map(math.radians, [lat1, lng1, lat2, lng2])

    dlat = lat2 - lat1
    dlng = lng2 - lng1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    # Rounding (or out-of-range degrees) can push `a` past [0, 1]; NaN compares false and passes through
    if a > 1.0:
        a = 1.0
    elif a < 0.0:
        a = 0.0
    c = 2 * math.asin(math.sqrt(a))

    return c * EARTH_RADIUS_KM
