"""
Purpose: Geographic value types and great-circle math.
What it does:
- GeoPoint: immutable (lat, lon) in decimal degrees, range checked
- Position: a GeoPoint as reported by a location source (capture time + accuracy)
- haversine_m: spherical-earth distance in meters

Rule: No I/O here, everything is pure.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

EARTH_RADIUS_M = 6_371_000.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float

    def __post_init__(self):
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"longitude out of range: {self.lon}")

    @classmethod
    def from_pair(cls, pair: Sequence[float]) -> GeoPoint:
        """Build from the `[lat, lon]` wire form used by the backend."""
        lat, lon = pair
        return cls(lat=float(lat), lon=float(lon))

    def to_pair(self) -> List[float]:
        return [self.lat, self.lon]


@dataclass(frozen=True)
class Position:
    """
    A fix from the location source.
    `timestamp` is only used to order fixes and is never persisted.
    """

    point: GeoPoint
    timestamp: float
    accuracy_m: Optional[float] = None


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters between two points (R = 6 371 000 m)."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lon - a.lon)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # rounding can push h just past 1 for near-antipodal pairs
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c
