"""Locations app models.

A Location is an addressable endpoint for stock. It is either a fixed Site
or a mobile Vehicle; both share the ``Location`` row that the ledger points
at, so inventory logic never needs to know which concrete kind it holds.
"""

from common.choices import LocationKind, VehicleClass
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Location(TimeStampedModel):
    KIND_SITE = LocationKind.SITE
    KIND_VEHICLE = LocationKind.VEHICLE
    KIND_CHOICES = LocationKind.choices

    # Set by concrete subclasses
    LOCATION_KIND = None

    kind = models.CharField(max_length=16, choices=KIND_CHOICES, editable=False, db_index=True)
    name = models.CharField(max_length=200)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.get_kind_display()}: {self.name}"

    def save(self, *args, **kwargs):
        if self.LOCATION_KIND:
            self.kind = self.LOCATION_KIND
        super().save(*args, **kwargs)

    @property
    def is_site(self) -> bool:
        return self.kind == self.KIND_SITE

    @property
    def is_vehicle(self) -> bool:
        return self.kind == self.KIND_VEHICLE


class Site(Location):
    """Fixed address where equipment is dropped off or picked up."""

    LOCATION_KIND = LocationKind.SITE

    street = models.CharField(max_length=200, blank=True)
    city = models.CharField(max_length=120, blank=True)
    province = models.CharField(max_length=64, blank=True)
    postal_code = models.CharField(max_length=16, blank=True)

    @property
    def display_address(self) -> str:
        parts = [self.street, self.city, self.province, self.postal_code]
        return ", ".join(p for p in parts if p)


class Vehicle(Location):
    """Truck carrying equipment between sites, optionally assigned a driver."""

    LOCATION_KIND = LocationKind.VEHICLE
    CLASS_LCT = VehicleClass.LCT
    CLASS_HWY = VehicleClass.HWY
    CLASS_CHOICES = VehicleClass.choices

    license_plate = models.CharField(max_length=32)
    unit_number = models.CharField(max_length=32, blank=True)
    vehicle_class = models.CharField(max_length=8, choices=CLASS_CHOICES, default=CLASS_HWY)
    driver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="assigned_vehicles",
    )

    class Meta:
        indexes = [
            models.Index(fields=["license_plate"], name="locations_vehicle_plate_idx"),
        ]
