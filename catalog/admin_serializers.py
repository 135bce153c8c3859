"""Admin serializers for write endpoints in the catalog app."""

from rest_framework import serializers

from .models import InventoryItem


class InventoryItemAdminSerializer(serializers.ModelSerializer):
    """Staff create/update of catalog items.

    ``sku`` and ``type`` become read-only once the item appears in the ledger.
    """

    class Meta:
        model = InventoryItem
        fields = [
            "id",
            "name",
            "sku",
            "description",
            "type",
            "width_mm",
            "height_mm",
            "reflectivity_astm_type",
            "lct_required_qty",
            "hwy_required_qty",
            "billable",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate_sku(self, value):
        value = (value or "").strip()
        if not value:
            return value
        qs = InventoryItem.objects.filter(sku=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("An item with this SKU already exists.")
        return value

    def validate(self, attrs):
        if self.instance is not None and self.instance.is_referenced():
            locked = {
                name: "Cannot change once the item has ledger history."
                for name in InventoryItem.LOCKED_FIELDS
                if name in attrs and attrs[name] != getattr(self.instance, name)
            }
            if locked:
                raise serializers.ValidationError(locked)
        return attrs
