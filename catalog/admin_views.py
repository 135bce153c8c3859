"""Admin viewsets for write endpoints in the catalog app.

Endpoints are restricted to staff users and use scoped throttling.
"""

import logging

from common.throttling import SettingsScopedRateThrottle
from django.db import transaction
from django.db.models import ProtectedError
from drf_spectacular.utils import extend_schema, extend_schema_view
from inventory.models import StockLevel
from rest_framework import permissions, status, viewsets
from rest_framework.response import Response

from .admin_serializers import InventoryItemAdminSerializer
from .models import InventoryItem

logger = logging.getLogger("fieldstock.catalog")


class AdminBaseViewSet(viewsets.ModelViewSet):
    permission_classes = [permissions.IsAdminUser]
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "admin_write"


@extend_schema_view(
    list=extend_schema(tags=["Admin Endpoints"], summary="List inventory items (admin)"),
    retrieve=extend_schema(tags=["Admin Endpoints"], summary="Get inventory item (admin)"),
    create=extend_schema(tags=["Admin Endpoints"], summary="Create inventory item"),
    update=extend_schema(tags=["Admin Endpoints"], summary="Update inventory item"),
    partial_update=extend_schema(tags=["Admin Endpoints"], summary="Partial update inventory item"),
    destroy=extend_schema(
        tags=["Admin Endpoints"],
        summary="Delete inventory item",
        description="Items with ledger history cannot be deleted; retire them instead.",
    ),
)
class InventoryItemAdminViewSet(AdminBaseViewSet):
    queryset = InventoryItem.objects.all().order_by("name", "id")
    serializer_class = InventoryItemAdminSerializer

    def destroy(self, request, *args, **kwargs):
        item = self.get_object()
        if item.is_referenced():
            return Response(
                {"detail": "Item has ledger history; retire it instead.", "code": "protected"},
                status=status.HTTP_409_CONFLICT,
            )
        try:
            with transaction.atomic():
                # Empty projection rows can exist from zero-delta audits
                StockLevel.objects.filter(item=item, quantity=0).delete()
                item.delete()
        except ProtectedError:
            return Response(
                {"detail": "Item is still held at a location.", "code": "protected"},
                status=status.HTTP_409_CONFLICT,
            )
        logger.info("catalog.item_deleted", extra={"event": "catalog.item_deleted", "item_id": kwargs.get("pk")})
        return Response(status=status.HTTP_204_NO_CONTENT)
