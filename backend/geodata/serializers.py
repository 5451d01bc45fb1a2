from rest_framework import serializers

from .models import Polygon

MIN_POINTS = 3


class LatLngField(serializers.ListField):
    child = serializers.FloatField()

    def __init__(self, **kwargs):
        kwargs.setdefault("min_length", 2)
        kwargs.setdefault("max_length", 2)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        values = super().to_internal_value(data)
        if len(values) != 2:
            raise serializers.ValidationError("Expected a [lat, lng] pair")
        lat, lng = values
        if not -90 <= lat <= 90 or not -180 <= lng <= 180:
            raise serializers.ValidationError("Coordinates out of range")
        return [lat, lng]


class PolygonSerializer(serializers.ModelSerializer):
    coordinates = serializers.ListField(child=LatLngField())

    class Meta:
        model = Polygon
        fields = ['id', 'coordinates']
        read_only_fields = ['id']

    def validate_coordinates(self, value):
        if len(value) < MIN_POINTS:
            raise serializers.ValidationError(f"A polygon must have at least {MIN_POINTS} points")
        return value


class RouteRequestSerializer(serializers.Serializer):
    start = LatLngField()
    end = LatLngField()
