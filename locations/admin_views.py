"""Staff-only write endpoints for sites and vehicles."""

import logging

from catalog.admin_views import AdminBaseViewSet
from django.db import transaction
from django.db.models import ProtectedError
from drf_spectacular.utils import extend_schema, extend_schema_view
from inventory.models import StockLevel
from inventory.services import stock_new_vehicle
from rest_framework import status
from rest_framework.response import Response

from .admin_serializers import SiteAdminSerializer, VehicleAdminSerializer
from .models import Site, Vehicle

logger = logging.getLogger("fieldstock.locations")


class LocationAdminViewSet(AdminBaseViewSet):
    def destroy(self, request, *args, **kwargs):
        location = self.get_object()
        try:
            with transaction.atomic():
                StockLevel.objects.filter(location_id=location.pk, quantity=0).delete()
                location.delete()
        except ProtectedError:
            return Response(
                {"detail": "Location has ledger history; deactivate it instead.", "code": "protected"},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(tags=["Admin Endpoints"], summary="List sites (admin)"),
    retrieve=extend_schema(tags=["Admin Endpoints"], summary="Get site (admin)"),
    create=extend_schema(tags=["Admin Endpoints"], summary="Create site"),
    update=extend_schema(tags=["Admin Endpoints"], summary="Update site"),
    partial_update=extend_schema(tags=["Admin Endpoints"], summary="Partial update site"),
    destroy=extend_schema(tags=["Admin Endpoints"], summary="Delete site"),
)
class SiteAdminViewSet(LocationAdminViewSet):
    queryset = Site.objects.all().order_by("name", "id")
    serializer_class = SiteAdminSerializer


@extend_schema_view(
    list=extend_schema(tags=["Admin Endpoints"], summary="List vehicles (admin)"),
    retrieve=extend_schema(tags=["Admin Endpoints"], summary="Get vehicle (admin)"),
    create=extend_schema(
        tags=["Admin Endpoints"],
        summary="Create vehicle",
        description="With `auto_stock` the new vehicle is loaded from the office pool up to its class targets.",
    ),
    update=extend_schema(tags=["Admin Endpoints"], summary="Update vehicle"),
    partial_update=extend_schema(tags=["Admin Endpoints"], summary="Partial update vehicle"),
    destroy=extend_schema(tags=["Admin Endpoints"], summary="Delete vehicle"),
)
class VehicleAdminViewSet(LocationAdminViewSet):
    queryset = Vehicle.objects.select_related("driver").order_by("name", "id")
    serializer_class = VehicleAdminSerializer

    def perform_create(self, serializer):
        auto_stock = serializer.validated_data.get("auto_stock", False)
        with transaction.atomic():
            vehicle = serializer.save()
            stocked = stock_new_vehicle(vehicle=vehicle, submitted_by=self.request.user) if auto_stock else []
        logger.info(
            "locations.vehicle_created",
            extra={"event": "locations.vehicle_created", "vehicle_id": vehicle.id, "stocked_lines": len(stocked)},
        )
