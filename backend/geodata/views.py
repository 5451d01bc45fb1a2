import logging

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Polygon
from .ors_client import ORSError, fetch_directions
from .serializers import PolygonSerializer, RouteRequestSerializer

logger = logging.getLogger(__name__)


def first_error(errors) -> str:
    """Flatten DRF's nested error dict into the single message clients display."""
    if isinstance(errors, dict):
        for value in errors.values():
            return first_error(value)
    if isinstance(errors, list) and errors:
        return first_error(errors[0])
    return str(errors)


class PolygonListCreateView(generics.ListCreateAPIView):
    """
    GET  -> every stored polygon
    POST -> store one polygon, at least 3 points
    """
    queryset = Polygon.objects.all()
    serializer_class = PolygonSerializer
    pagination_class = None

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        serializer.save()
        logger.info("polygon saved: id=%s points=%d", serializer.data["id"], len(serializer.data["coordinates"]))
        return Response(
            {"message": "Polygon saved successfully", "polygon": serializer.data},
            status=status.HTTP_201_CREATED,
        )


class RouteProxyView(APIView):
    """
    Forwards start/end to OpenRouteService with the server's API key and
    returns the upstream GeoJSON untouched.
    """

    def post(self, request):
        serializer = RouteRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            data = fetch_directions(serializer.validated_data["start"], serializer.validated_data["end"])
        except ORSError:
            return Response({"error": "Failed to fetch route"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(data, status=status.HTTP_200_OK)
