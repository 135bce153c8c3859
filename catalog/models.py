"""Catalog app models.

Defines the equipment catalog: every kind of item (sign, barricade, cone,
...) whose units the inventory ledger tracks across sites and vehicles.
"""

from common.choices import ActiveRetired, ItemType, VehicleClass
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class InventoryItem(TimeStampedModel):
    """Catalog entry for a trackable piece of equipment.

    ``lct_required_qty`` and ``hwy_required_qty`` are the per-vehicle targets
    used to auto-stock new vehicles of each class and to flag low stock.
    Once an item is referenced by a ledger transaction its identity fields
    (``LOCKED_FIELDS``) can no longer change.
    """

    STATUS_ACTIVE = ActiveRetired.ACTIVE
    STATUS_RETIRED = ActiveRetired.RETIRED
    STATUS_CHOICES = ActiveRetired.choices

    LOCKED_FIELDS = ("sku", "type")

    name = models.CharField(max_length=200)
    sku = models.CharField(max_length=64, blank=True, default="")
    description = models.TextField(blank=True)
    type = models.CharField(max_length=32, choices=ItemType.choices, default=ItemType.OTHER)
    # Sign-specific attributes
    width_mm = models.PositiveIntegerField(null=True, blank=True)
    height_mm = models.PositiveIntegerField(null=True, blank=True)
    reflectivity_astm_type = models.CharField(max_length=32, blank=True)
    lct_required_qty = models.PositiveIntegerField(default=0)
    hwy_required_qty = models.PositiveIntegerField(default=0)
    billable = models.BooleanField(default=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)

    class Meta:
        ordering = ["name", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["sku"],
                condition=~models.Q(sku=""),
                name="unique_inventory_item_sku",
            ),
        ]
        indexes = [
            models.Index(fields=["type", "status"], name="catalog_item_type_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} ({self.sku})" if self.sku else self.name

    @property
    def is_active(self) -> bool:
        return self.status == self.STATUS_ACTIVE

    def required_quantity_for(self, vehicle_class: str) -> int:
        if vehicle_class == VehicleClass.LCT:
            return int(self.lct_required_qty)
        return int(self.hwy_required_qty)

    def is_referenced(self) -> bool:
        return self.transactions.exists()
