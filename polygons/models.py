"""
Purpose: Domain models for the Polygons capability.
What it does:
- Defines core data structures:
- Polygon (ordered vertices, server id once persisted, local key before that)
- PolygonCollection (what the map layer displays: loaded + locally committed)

Rule: No HTTP calls, no capture logic. Models only.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from common.errors import ValidationError
from common.geo import GeoPoint

MIN_VERTICES = 3


@dataclass(frozen=True)
class Polygon:
    """
    A committed shape. Boundary order is the order the user clicked.
    Never mutated after creation.
    """

    vertices: Tuple[GeoPoint, ...]
    id: Optional[str] = None

    # identifies the optimistic display entry until the server assigns `id`
    local_key: str = field(default_factory=lambda: str(uuid.uuid4()), compare=False)

    def __post_init__(self):
        vertices = tuple(self.vertices)
        if len(vertices) < MIN_VERTICES:
            raise ValidationError(f"A polygon must have at least {MIN_VERTICES} points, got {len(vertices)}")
        object.__setattr__(self, "vertices", vertices)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Polygon:
        """
        Build from a store record: {"id": ..., "coordinates": [[lat, lon], ...]}.
        Mongo-style "_id" is accepted too.
        """
        raw_id = record.get("id", record.get("_id"))
        return cls(
            vertices=tuple(GeoPoint.from_pair(pair) for pair in record["coordinates"]),
            id=str(raw_id) if raw_id is not None else None,
        )

    def coordinates(self) -> List[List[float]]:
        return [vertex.to_pair() for vertex in self.vertices]


class PolygonCollection:
    """
    Display set for the polygon layer. Order carries no meaning.
    Entries are matched by server id when they have one, otherwise by local key.
    """

    def __init__(self, polygons: Iterable[Polygon] = ()):
        self._items: List[Polygon] = list(polygons)

    def __iter__(self) -> Iterator[Polygon]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, polygon: Polygon) -> bool:
        return self._index_of(polygon) is not None

    def add(self, polygon: Polygon) -> None:
        if polygon not in self:
            self._items.append(polygon)

    def discard(self, polygon: Polygon) -> bool:
        index = self._index_of(polygon)
        if index is None:
            return False
        del self._items[index]
        return True

    def replace(self, old: Polygon, new: Polygon) -> None:
        """Swap an optimistic entry for its server-confirmed version."""
        index = self._index_of(old)
        if index is None or new in self:
            # the old entry is gone or the server copy is already shown
            self.discard(old)
            self.add(new)
            return
        self._items[index] = new

    def merge(self, polygons: Sequence[Polygon]) -> int:
        """Add server polygons not shown yet. Returns how many were added."""
        added = 0
        for polygon in polygons:
            if polygon not in self:
                self._items.append(polygon)
                added += 1
        return added

    def persisted(self) -> List[Polygon]:
        return [polygon for polygon in self._items if polygon.is_persisted]

    def pending(self) -> List[Polygon]:
        return [polygon for polygon in self._items if not polygon.is_persisted]

    def _index_of(self, polygon: Polygon) -> Optional[int]:
        for index, item in enumerate(self._items):
            if polygon.id is not None and item.id == polygon.id:
                return index
            if item.local_key == polygon.local_key:
                return index
        return None
