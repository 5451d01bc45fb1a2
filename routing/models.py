"""
Purpose: Domain model for a computed route.
What it does:
Route = ordered path + upstream duration + derived ETA. A Route is replaced
wholesale on refresh and never edited in place.

Rule: No HTTP calls here. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from common.geo import GeoPoint
from .eta_service import eta_minutes


@dataclass(frozen=True)
class Route:
    path: Tuple[GeoPoint, ...]
    duration_s: float
    eta_minutes: int

    @classmethod
    def new(cls, path: Sequence[GeoPoint], duration_s: float) -> Route:
        # a route needs a start and an end; a shorter path means "no route"
        if len(path) < 2:
            raise ValueError(f"a route needs at least 2 points, got {len(path)}")
        return cls(
            path=tuple(path),
            duration_s=float(duration_s),
            eta_minutes=eta_minutes(duration_s),
        )

    @property
    def start(self) -> GeoPoint:
        return self.path[0]

    @property
    def end(self) -> GeoPoint:
        return self.path[-1]
