"""
Purpose: Freehand polygon capture state machine.
What it does:
Turns map clicks into an ordered vertex list and a double-click into a commit.

EMPTY   --click(p)-->     DRAWING([p])
DRAWING --click(p)-->     DRAWING(vs + [p])
DRAWING --double_click--> EMPTY, commit(vs)   when len(vs) >= 3
DRAWING --double_click--> unchanged           when len(vs) < 3
any     --cancel-->       EMPTY
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple

from common.geo import GeoPoint
from .models import MIN_VERTICES

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    EMPTY = "empty"
    DRAWING = "drawing"


class PolygonCapture:
    def __init__(self, on_commit: Optional[Callable[[Tuple[GeoPoint, ...]], object]] = None):
        self.on_commit = on_commit
        self._draft: List[GeoPoint] = []

    @property
    def state(self) -> CaptureState:
        return CaptureState.DRAWING if self._draft else CaptureState.EMPTY

    @property
    def vertices(self) -> Tuple[GeoPoint, ...]:
        """The draft so far, in click order."""
        return tuple(self._draft)

    def click(self, point: GeoPoint) -> None:
        # no dedup, no minimum spacing: every click is a vertex
        self._draft.append(point)

    def double_click(self) -> Optional[Tuple[GeoPoint, ...]]:
        """
        Commit the draft if it has enough vertices.
        Returns the committed vertices, or None when the double-click was ignored.
        """
        if len(self._draft) < MIN_VERTICES:
            logger.debug("double-click ignored with %d vertices", len(self._draft))
            return None

        vertices = tuple(self._draft)
        self._draft = []
        if self.on_commit is not None:
            self.on_commit(vertices)
        return vertices

    def cancel(self) -> None:
        self._draft = []
