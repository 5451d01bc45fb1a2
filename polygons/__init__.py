"""
Polygons domain package.

Public API:
- Domain models: Polygon, PolygonCollection
- Capture state machine: PolygonCapture, CaptureState
- Persistence: PolygonStoreClient, PolygonLayer
"""
from .capture import CaptureState, PolygonCapture
from .layer import PolygonLayer
from .models import Polygon, PolygonCollection
from .store_client import PolygonStoreClient

__all__ = ["Polygon",
           "PolygonCollection",
             "PolygonCapture",
               "CaptureState",
               "PolygonStoreClient",
               "PolygonLayer",
               ]
