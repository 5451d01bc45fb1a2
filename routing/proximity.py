#Purpose: Movement gate for the route refresh loop.
#Decides whether the user moved far enough since the last evaluated position
#to justify another upstream routing call.
#Typical responsibilities:
#first observation (no last position) always refreshes
#great-circle distance (haversine, spherical earth) against the threshold
#threshold is injected by the caller (NavigationPolicy), never hard-coded here
#Output: a plain bool. No side effects.

from typing import Optional

from common.geo import GeoPoint, haversine_m


def should_refresh(
        last: Optional[GeoPoint],
        current: GeoPoint,
        threshold_m: float,
) -> bool:
    """
    True when `current` is strictly farther than `threshold_m` from `last`.

    Args:
        last: last position a route was successfully computed from, or None
        current: position just read from the tracker
        threshold_m: movement in meters that justifies a new route request

    Being exactly at the threshold does not refresh.
    """
    if last is None:
        return True
    return haversine_m(last, current) > threshold_m
