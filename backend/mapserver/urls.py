from django.urls import path

from geodata.views import PolygonListCreateView, RouteProxyView

urlpatterns = [
    path('api/polygons', PolygonListCreateView.as_view(), name='polygons'),
    path('api/getRoute', RouteProxyView.as_view(), name='get-route'),
]
