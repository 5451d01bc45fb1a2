"""
Purpose: Owns the PolygonCollection the map displays.
What it does:
- load(): seed the collection once from the store
- commit(vertices): optimistic add -> one save -> confirm or roll back

Rule: the collection is written only here. Capture owns drafts, the store
client owns HTTP, this owns what is on screen.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from common.errors import LiveMapError, ValidationError
from common.geo import GeoPoint
from common.result import Result
from .models import Polygon, PolygonCollection
from .store_client import PolygonStoreClient

logger = logging.getLogger(__name__)


class PolygonLayer:
    def __init__(self, store: PolygonStoreClient,
                 on_error: Optional[Callable[[LiveMapError], None]] = None):
        self.store = store
        self.on_error = on_error
        self.collection = PolygonCollection()
        self.loaded = False

    def load(self) -> Result[List[Polygon]]:
        """
        Merge every stored polygon into the collection.
        On failure the collection is left as it was and nothing retries.
        """
        result = self.store.load_all()
        if not result.ok:
            self._surface(result.error)
            return result

        added = self.collection.merge(result.value)
        self.loaded = True
        logger.info("loaded %d polygons (%d new)", len(result.value), added)
        return result

    def commit(self, vertices: Sequence[GeoPoint]) -> Result[Polygon]:
        """
        Show the shape immediately, then reconcile with the store:
        success swaps in the server copy (with its id), failure removes it.
        """
        optimistic: Optional[Polygon] = None
        try:
            optimistic = Polygon(vertices=tuple(vertices))
        except ValidationError:
            # not drawable; the store still gets the payload and decides
            logger.debug("commit with %d vertices has no optimistic entry", len(vertices))

        if optimistic is not None:
            self.collection.add(optimistic)

        result = self.store.save(vertices)

        if result.ok:
            if optimistic is not None:
                self.collection.replace(optimistic, result.value)
            else:
                self.collection.add(result.value)
            return result

        if optimistic is not None:
            self.collection.discard(optimistic)
        self._surface(result.error)
        return result

    def polygons(self) -> List[Polygon]:
        return list(self.collection)

    def _surface(self, error: LiveMapError) -> None:
        logger.warning("polygon layer: %s", error)
        if self.on_error is not None:
            self.on_error(error)
