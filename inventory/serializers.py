"""Serializers for the inventory ledger.

Read serializers expose stock levels, transactions and grouped history.
Write serializers validate request bodies and hand plain values to
``inventory.services``; request keys follow the dashboard's camelCase.
"""

from common.choices import ItemStatus
from rest_framework import serializers

from .ledger import max_quantity
from .models import StockLevel, Transaction
from .selectors import actor_display_name
from .services import SHORTFALL_STATUSES, TRANSFER_STATUSES


class StockLevelSerializer(serializers.ModelSerializer):
    """Current on-hand quantity of one item at a location."""

    inventory_id = serializers.IntegerField(source="item_id", read_only=True)
    name = serializers.CharField(source="item.name", read_only=True)
    sku = serializers.CharField(source="item.sku", read_only=True)
    type = serializers.CharField(source="item.type", read_only=True)
    item_status = serializers.CharField(source="item.status", read_only=True)

    class Meta:
        model = StockLevel
        fields = ["inventory_id", "name", "sku", "type", "item_status", "quantity", "updated_at"]
        read_only_fields = fields


class VehicleStockSerializer(serializers.Serializer):
    """On-board stock with the vehicle class target and its status."""

    inventory_id = serializers.IntegerField(source="item.id")
    name = serializers.CharField(source="item.name")
    sku = serializers.CharField(source="item.sku")
    type = serializers.CharField(source="item.type")
    quantity = serializers.IntegerField()
    required_quantity = serializers.IntegerField()
    stock_status = serializers.CharField()


class TransactionSerializer(serializers.ModelSerializer):
    """Read-only representation of a ledger transaction."""

    sequence = serializers.IntegerField(read_only=True)
    inventory_id = serializers.IntegerField(source="item_id", read_only=True)
    inventory_name = serializers.CharField(source="item.name", read_only=True)
    sku = serializers.CharField(source="item.sku", read_only=True)
    inventory_type = serializers.CharField(source="item.type", read_only=True)
    source_location_name = serializers.CharField(source="source_location.name", read_only=True, default=None)
    source_location_kind = serializers.CharField(source="source_location.kind", read_only=True, default=None)
    dest_location_name = serializers.CharField(source="dest_location.name", read_only=True, default=None)
    dest_location_kind = serializers.CharField(source="dest_location.kind", read_only=True, default=None)
    submitted_by_name = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "sequence",
            "inventory_id",
            "inventory_name",
            "sku",
            "inventory_type",
            "quantity",
            "transaction_type",
            "source_location",
            "source_location_name",
            "source_location_kind",
            "dest_location",
            "dest_location_name",
            "dest_location_kind",
            "submitted_by",
            "submitted_by_name",
            "job_id",
            "item_status",
            "is_audit",
            "notes",
            "created_at",
        ]
        read_only_fields = fields

    def get_submitted_by_name(self, obj) -> str:
        return actor_display_name(obj.submitted_by)


class HistoryGroupSerializer(serializers.Serializer):
    """One display event built from transactions sharing type, submitter and time window."""

    id = serializers.CharField(source="key")
    transaction_type = serializers.CharField()
    submitted_by = serializers.IntegerField(source="submitted_by_id", allow_null=True)
    display_actor = serializers.CharField()
    created_at = serializers.DateTimeField()
    job_id = serializers.CharField()
    items = TransactionSerializer(many=True)


def validate_max_quantity(value):
    limit = max_quantity()
    if value is not None and value > limit:
        raise serializers.ValidationError(f"Ensure this value is less than or equal to {limit}.")


class ItemQuantitySerializer(serializers.Serializer):
    inventoryId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, validators=[validate_max_quantity])


class _ItemLinesMixin:
    def validate_items(self, value):
        ids = [line["inventoryId"] for line in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Each item may appear only once.")
        return value


class SetItemQuantitySerializer(serializers.Serializer):
    inventoryId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=0, validators=[validate_max_quantity])


class VehicleInventoryWriteSerializer(_ItemLinesMixin, serializers.Serializer):
    """Add or set items on a vehicle.

    With ``source`` the quantities are loaded from the office pool or a site.
    Without it, each quantity is the new on-board target.
    """

    SOURCE_OFFICE = "office"
    SOURCE_SITE = "site"

    items = SetItemQuantitySerializer(many=True, allow_empty=False)
    source = serializers.ChoiceField(choices=[SOURCE_OFFICE, SOURCE_SITE], required=False)
    sourceSiteId = serializers.IntegerField(required=False, min_value=1)
    jobId = serializers.CharField(required=False, allow_blank=True, max_length=64)

    def validate(self, attrs):
        source = attrs.get("source")
        if source == self.SOURCE_SITE and not attrs.get("sourceSiteId"):
            raise serializers.ValidationError({"sourceSiteId": "Required when source is 'site'."})
        if source and any(line["quantity"] < 1 for line in attrs["items"]):
            raise serializers.ValidationError({"items": "Quantities must be positive when loading from a source."})
        return attrs


class DropOffSerializer(_ItemLinesMixin, serializers.Serializer):
    DEST_OFFICE = "office"
    DEST_SITE = "site"

    items = ItemQuantitySerializer(many=True, allow_empty=False)
    destination = serializers.ChoiceField(choices=[DEST_OFFICE, DEST_SITE])
    destinationSiteId = serializers.IntegerField(required=False, min_value=1)
    jobId = serializers.CharField(required=False, allow_blank=True, max_length=64)

    def validate(self, attrs):
        if attrs["destination"] == self.DEST_SITE and not attrs.get("destinationSiteId"):
            raise serializers.ValidationError({"destinationSiteId": "Required when destination is 'site'."})
        return attrs


class AuditLineSerializer(serializers.Serializer):
    inventoryId = serializers.IntegerField(min_value=1)
    qty = serializers.IntegerField(min_value=0, required=False, validators=[validate_max_quantity])
    quantity = serializers.IntegerField(min_value=0, required=False, validators=[validate_max_quantity])

    def validate(self, attrs):
        counted = attrs.get("qty", attrs.get("quantity"))
        if counted is None:
            raise serializers.ValidationError("Provide the counted quantity as 'qty'.")
        return {"inventoryId": attrs["inventoryId"], "qty": counted}


class AuditSubmitSerializer(_ItemLinesMixin, serializers.Serializer):
    """Physical count for a location.

    ``isAudit`` separates formal supervisor audits from routine corrections.
    """

    items = AuditLineSerializer(many=True, allow_empty=False)
    isAudit = serializers.BooleanField(required=False, default=True)
    itemStatus = serializers.ChoiceField(
        choices=[s.value for s in SHORTFALL_STATUSES], required=False, default=ItemStatus.MISSING.value
    )
    notes = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def counts(self) -> dict:
        return {line["inventoryId"]: line["qty"] for line in self.validated_data["items"]}


class ReportStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in SHORTFALL_STATUSES])
    quantity = serializers.IntegerField(min_value=1, validators=[validate_max_quantity])
    notes = serializers.CharField(required=False, allow_blank=True, max_length=255)


class TransferSerializer(serializers.Serializer):
    """Single-item transfer. A null location id addresses the office pool."""

    inventoryId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, validators=[validate_max_quantity])
    sourceLocationId = serializers.IntegerField(allow_null=True, min_value=1)
    destLocationId = serializers.IntegerField(allow_null=True, min_value=1)
    jobId = serializers.CharField(required=False, allow_blank=True, max_length=64)
    itemStatus = serializers.ChoiceField(
        choices=[s.value for s in TRANSFER_STATUSES], required=False, default=ItemStatus.ACTIVE.value
    )
    notes = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate(self, attrs):
        if attrs["sourceLocationId"] is None and attrs["destLocationId"] is None:
            raise serializers.ValidationError("Source and destination cannot both be the office pool.")
        return attrs
