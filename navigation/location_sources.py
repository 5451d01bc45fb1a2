"""
Purpose: LocationSource implementations.
What it does:
TraceLocationSource replays a recorded GPS trace on the Scheduler, so a whole
drive can be simulated on a ManualClock in milliseconds.

Trace columns:
- t          seconds after the watch starts
- lat, lon   decimal degrees
- accuracy   optional, meters
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, List

import pandas as pd

from common.errors import LocationUnavailable
from common.geo import GeoPoint, Position
from .scheduling import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("t", "lat", "lon")


class TraceLocationSource:
    def __init__(self, trace: pd.DataFrame, scheduler: Scheduler):
        missing = [column for column in REQUIRED_COLUMNS if column not in trace.columns]
        if missing:
            raise ValueError(f"trace is missing columns: {missing}")
        self.trace = trace.sort_values("t").reset_index(drop=True)
        self.scheduler = scheduler
        self._ids = itertools.count(1)
        self._pending: Dict[int, List[TimerHandle]] = {}

    @classmethod
    def from_csv(cls, path: str, scheduler: Scheduler) -> TraceLocationSource:
        return cls(pd.read_csv(path), scheduler)

    def watch(self, on_fix: Callable[[Position], None],
              on_error: Callable[[Exception], None]) -> int:
        if self.trace.empty:
            raise LocationUnavailable("trace has no fixes")

        watch_id = next(self._ids)
        started_at = self.scheduler.now()
        has_accuracy = "accuracy" in self.trace.columns
        handles: List[TimerHandle] = []

        for row in self.trace.itertuples(index=False):
            try:
                point = GeoPoint(lat=float(row.lat), lon=float(row.lon))
            except ValueError as exc:
                # bad row: report it when it would have been emitted, like a lost fix
                handles.append(self.scheduler.call_later(
                    float(row.t), _bind(on_error, LocationUnavailable(str(exc), cause=exc))))
                continue
            accuracy = float(row.accuracy) if has_accuracy and pd.notna(row.accuracy) else None
            position = Position(point=point, timestamp=started_at + float(row.t), accuracy_m=accuracy)
            handles.append(self.scheduler.call_later(float(row.t), _bind(on_fix, position)))

        self._pending[watch_id] = handles
        logger.debug("watch %s replaying %d fixes", watch_id, len(handles))
        return watch_id

    def clear_watch(self, watch_id: int) -> None:
        for handle in self._pending.pop(watch_id, []):
            handle.cancel()

    def active_watches(self) -> int:
        return len(self._pending)


def _bind(callback, value):
    return lambda: callback(value)
