"""Read serializers for the equipment catalog."""

from inventory.models import StockLevel
from rest_framework import serializers

from .models import InventoryItem


class InventoryItemSerializer(serializers.ModelSerializer):
    on_hand = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = InventoryItem
        fields = [
            "id",
            "name",
            "sku",
            "type",
            "status",
            "billable",
            "lct_required_qty",
            "hwy_required_qty",
            "on_hand",
        ]


class InventoryItemDetailSerializer(InventoryItemSerializer):
    class Meta(InventoryItemSerializer.Meta):
        fields = InventoryItemSerializer.Meta.fields + [
            "description",
            "width_mm",
            "height_mm",
            "reflectivity_astm_type",
            "created_at",
            "updated_at",
        ]


class ItemHoldingSerializer(serializers.ModelSerializer):
    """A location currently holding units of an item."""

    location_id = serializers.IntegerField(read_only=True)
    location_name = serializers.CharField(source="location.name", read_only=True)
    location_kind = serializers.CharField(source="location.kind", read_only=True)

    class Meta:
        model = StockLevel
        fields = ["location_id", "location_name", "location_kind", "quantity", "updated_at"]
        read_only_fields = fields
