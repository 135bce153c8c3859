"""Read-only endpoints for sites and vehicles."""

from common.throttling import SettingsScopedRateThrottle
from django_filters import rest_framework as filters
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import permissions, viewsets

from .models import Site, Vehicle
from .serializers import SiteSerializer, VehicleSerializer


class LocationReadViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [permissions.IsAuthenticated]
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "locations"
    filter_backends = [filters.DjangoFilterBackend, drf_filters.SearchFilter, drf_filters.OrderingFilter]
    ordering_fields = ["name", "created_at"]


@extend_schema_view(
    list=extend_schema(
        tags=["Locations"],
        summary="List sites",
        description="Filter by `is_active` or `city`; search name and address with `search`.",
    ),
    retrieve=extend_schema(tags=["Locations"], summary="Get site"),
)
class SiteViewSet(LocationReadViewSet):
    queryset = Site.objects.all().order_by("name", "id")
    serializer_class = SiteSerializer
    filterset_fields = ["is_active", "city"]
    search_fields = ["name", "street", "city"]


@extend_schema_view(
    list=extend_schema(
        tags=["Locations"],
        summary="List vehicles",
        description="Filter by `is_active`, `vehicle_class` or `driver`; search name, plate and unit number.",
    ),
    retrieve=extend_schema(tags=["Locations"], summary="Get vehicle"),
)
class VehicleViewSet(LocationReadViewSet):
    queryset = Vehicle.objects.select_related("driver").order_by("name", "id")
    serializer_class = VehicleSerializer
    filterset_fields = ["is_active", "vehicle_class", "driver"]
    search_fields = ["name", "license_plate", "unit_number"]
