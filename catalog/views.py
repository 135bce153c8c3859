"""Read-only catalog endpoints: items, where they are, and their ledger trail."""

from common.throttling import SettingsScopedRateThrottle
from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from inventory import selectors as inventory_selectors
from inventory.filters import TransactionFilter
from inventory.serializers import TransactionSerializer
from inventory.views import HistoryPagination
from rest_framework import filters as drf_filters
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from . import selectors
from .models import InventoryItem
from .serializers import InventoryItemDetailSerializer, InventoryItemSerializer, ItemHoldingSerializer


class InventoryItemFilterSet(filters.FilterSet):
    class Meta:
        model = InventoryItem
        fields = ["type", "status", "billable"]


@extend_schema_view(
    list=extend_schema(
        summary="List inventory items",
        description=(
            "Returns catalog items with the total quantity on hand across all locations. "
            "Filter by `type`, `status` or `billable`; search name, SKU and description with `search`."
        ),
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Search items by text"),
            OpenApiParameter("ordering", OpenApiTypes.STR, location="query", description="Order by `name`, `sku` or `created_at`"),
        ],
        examples=[
            OpenApiExample(
                "Item list",
                value={
                    "count": 1,
                    "next": None,
                    "previous": None,
                    "results": [
                        {
                            "id": 3,
                            "name": "Cone 18in",
                            "sku": "CONE-18",
                            "type": "cone",
                            "status": "active",
                            "billable": True,
                            "lct_required_qty": 20,
                            "hwy_required_qty": 10,
                            "on_hand": 140,
                        }
                    ],
                },
                response_only=True,
            )
        ],
    ),
    retrieve=extend_schema(summary="Get inventory item", tags=["Catalog Endpoints"]),
)
class InventoryItemViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [permissions.IsAuthenticated]
    throttle_scope = "catalog"
    throttle_classes = [SettingsScopedRateThrottle]
    filterset_class = InventoryItemFilterSet
    filter_backends = [filters.DjangoFilterBackend, drf_filters.SearchFilter, drf_filters.OrderingFilter]
    search_fields = ["name", "sku", "description"]
    ordering_fields = ["name", "sku", "created_at"]

    def get_queryset(self):
        return selectors.list_items()

    def get_serializer_class(self):
        return InventoryItemDetailSerializer if self.action == "retrieve" else InventoryItemSerializer

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="Where an item is held",
        description="Locations currently holding the item, with quantities.",
        responses={200: ItemHoldingSerializer(many=True)},
    )
    @action(detail=True, methods=["get"], url_path="locations")
    def locations(self, request, pk=None):
        item = self.get_object()
        qs = inventory_selectors.list_item_holdings(item.id)
        return Response(ItemHoldingSerializer(qs, many=True).data)

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="Item ledger history",
        description="Every transaction of this item across all locations, newest first.",
        parameters=[
            OpenApiParameter("limit", OpenApiTypes.INT, location="query"),
            OpenApiParameter("offset", OpenApiTypes.INT, location="query"),
            OpenApiParameter("transaction_type", OpenApiTypes.STR, location="query"),
            OpenApiParameter("item_status", OpenApiTypes.STR, location="query"),
            OpenApiParameter("created_after", OpenApiTypes.DATETIME, location="query"),
            OpenApiParameter("created_before", OpenApiTypes.DATETIME, location="query"),
        ],
        responses={200: TransactionSerializer(many=True)},
    )
    @action(detail=True, methods=["get"], url_path="history")
    def history(self, request, pk=None):
        item = self.get_object()
        filterset = TransactionFilter(request.query_params, queryset=inventory_selectors.item_history(item.id))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        paginator = HistoryPagination()
        page = paginator.paginate_queryset(filterset.qs, request, view=self)
        return paginator.get_paginated_response(TransactionSerializer(page, many=True).data)


# EOF
