"""Inventory models: the movement ledger and its stock projection.

``Transaction`` is the append-only log and the only source of truth.
``StockLevel`` is a materialized fold of that log per (item, location),
written exclusively by ``inventory.ledger`` inside the same database
transaction as the log append.
"""

from common.choices import ItemStatus, TransactionType
from django.conf import settings
from django.db import models
from django.utils import timezone

from .exceptions import ImmutableRecordError


class StockLevel(models.Model):
    item = models.ForeignKey("catalog.InventoryItem", on_delete=models.PROTECT, related_name="stock_levels")
    location = models.ForeignKey("locations.Location", on_delete=models.PROTECT, related_name="stock_levels")
    quantity = models.IntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["location_id", "item_id"]
        constraints = [
            models.UniqueConstraint(fields=["item", "location"], name="unique_stock_level_per_pair"),
            models.CheckConstraint(name="stock_level_non_negative", condition=models.Q(quantity__gte=0)),
        ]
        indexes = [
            models.Index(fields=["location", "item"], name="stocklevel_location_item_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"StockLevel<{self.item_id}@{self.location_id}> q={self.quantity}"


class Transaction(models.Model):
    TYPE_VEHICLE_TO_SITE = TransactionType.VEHICLE_TO_SITE
    TYPE_SITE_TO_VEHICLE = TransactionType.SITE_TO_VEHICLE
    TYPE_AUDIT_ADJUSTMENT = TransactionType.AUDIT_ADJUSTMENT
    TYPE_CHOICES = TransactionType.choices

    STATUS_CHOICES = ItemStatus.choices

    item = models.ForeignKey("catalog.InventoryItem", on_delete=models.PROTECT, related_name="transactions")
    quantity = models.PositiveIntegerField()
    transaction_type = models.CharField(max_length=32, choices=TYPE_CHOICES, db_index=True)
    # Null source: stock entering from outside (office pool or audit "found").
    # Null destination: stock leaving (office pool or audit "lost").
    source_location = models.ForeignKey(
        "locations.Location",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="outbound_transactions",
    )
    dest_location = models.ForeignKey(
        "locations.Location",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="inbound_transactions",
    )
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="inventory_transactions",
    )
    job_id = models.CharField(max_length=64, blank=True, default="")
    item_status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=ItemStatus.ACTIVE, db_index=True)
    is_audit = models.BooleanField(default=False)
    notes = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(name="transaction_positive_qty", condition=models.Q(quantity__gt=0)),
            models.CheckConstraint(
                name="transaction_source_ne_dest",
                condition=~models.Q(source_location=models.F("dest_location")),
            ),
            models.CheckConstraint(
                name="transaction_has_location",
                condition=models.Q(source_location__isnull=False) | models.Q(dest_location__isnull=False),
            ),
        ]
        indexes = [
            models.Index(fields=["item", "created_at"], name="txn_item_created_idx"),
            models.Index(fields=["source_location", "created_at"], name="txn_source_created_idx"),
            models.Index(fields=["dest_location", "created_at"], name="txn_dest_created_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.transaction_type} {self.quantity} of {self.item_id}"

    @property
    def sequence(self) -> int:
        return self.id

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Ledger transactions cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Ledger transactions cannot be deleted")

    def signed_quantity_for(self, location_id: int) -> int:
        """Net effect of this transaction on the given location."""

        delta = 0
        if self.dest_location_id == location_id:
            delta += int(self.quantity)
        if self.source_location_id == location_id:
            delta -= int(self.quantity)
        return delta

    def counterpart_location_id(self, location_id: int):
        if self.source_location_id == location_id:
            return self.dest_location_id
        if self.dest_location_id == location_id:
            return self.source_location_id
        return None
