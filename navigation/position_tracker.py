"""
Purpose: Continuous device position, push-driven.
What it does:
Subscribes to a LocationSource and keeps the latest Position. Consumers get
every newer fix through `on_update`; source failures arrive as
LocationUnavailable through `on_error` and never propagate to the caller.

Rule: stop() always releases the source watch, on every exit path.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Hashable, Iterator, Optional, Protocol

from common.errors import LocationUnavailable
from common.geo import Position

logger = logging.getLogger(__name__)

OnUpdate = Callable[[Position], None]
OnError = Callable[[LocationUnavailable], None]


class LocationSource(Protocol):
    """Platform location API: push-based, one watch per subscriber."""

    def watch(self, on_fix: Callable[[Position], None],
              on_error: Callable[[Exception], None]) -> Hashable: ...

    def clear_watch(self, watch_id: Hashable) -> None: ...


@dataclass
class SubscriptionHandle:
    watch_id: Optional[Hashable]
    active: bool = True


class PositionTracker:
    def __init__(self, source: LocationSource):
        self.source = source
        self._latest: Optional[Position] = None

    @property
    def latest(self) -> Optional[Position]:
        """Most recent fix from any subscription, or None before the first fix."""
        return self._latest

    def start(self, on_update: OnUpdate, on_error: OnError) -> SubscriptionHandle:
        """
        Begin watching the source. If the source refuses (permission denied,
        no hardware) `on_error` receives LocationUnavailable and the returned
        handle is already inactive; calling start() again is allowed.
        """
        handle = SubscriptionHandle(watch_id=None)

        def handle_fix(position: Position) -> None:
            if not handle.active:
                return
            latest = self._latest
            if latest is not None and position.timestamp < latest.timestamp:
                # out-of-order fix, a newer one already won
                logger.debug("dropping stale fix at t=%s", position.timestamp)
                return
            self._latest = position
            on_update(position)

        def handle_error(exc: Exception) -> None:
            if not handle.active:
                return
            logger.warning("location source error: %s", exc)
            on_error(_as_location_unavailable(exc))

        try:
            handle.watch_id = self.source.watch(handle_fix, handle_error)
        except Exception as exc:
            logger.warning("could not start location watch: %s", exc)
            handle.active = False
            on_error(_as_location_unavailable(exc))
        return handle

    def stop(self, handle: SubscriptionHandle) -> None:
        if not handle.active:
            return
        handle.active = False
        if handle.watch_id is not None:
            watch_id, handle.watch_id = handle.watch_id, None
            self.source.clear_watch(watch_id)

    @contextmanager
    def tracking(self, on_update: OnUpdate, on_error: OnError) -> Iterator[SubscriptionHandle]:
        handle = self.start(on_update, on_error)
        try:
            yield handle
        finally:
            self.stop(handle)


def _as_location_unavailable(exc: Exception) -> LocationUnavailable:
    if isinstance(exc, LocationUnavailable):
        return exc
    if isinstance(exc, PermissionError):
        return LocationUnavailable("location permission denied", cause=exc)
    return LocationUnavailable(f"location source unavailable: {exc}", cause=exc)
