from .geocoder import Place, PlaceSearchClient

__all__ = ["Place", "PlaceSearchClient"]
