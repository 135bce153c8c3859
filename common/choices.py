"""Shared enumerations and choices used across apps."""

from django.db import models


class ActiveRetired(models.TextChoices):
    ACTIVE = "active", "Active"
    RETIRED = "retired", "Retired"


class ItemType(models.TextChoices):
    SIGN = "sign", "Sign"
    BARRICADE = "barricade", "Barricade"
    CONE = "cone", "Cone"
    DRUM = "drum", "Drum"
    MESSAGE_BOARD = "message_board", "Message Board"
    OTHER = "other", "Other"


class LocationKind(models.TextChoices):
    SITE = "site", "Site"
    VEHICLE = "vehicle", "Vehicle"


class VehicleClass(models.TextChoices):
    """Vehicle classes with their own auto-stock targets."""

    LCT = "lct", "Lane Closure Truck"
    HWY = "hwy", "Highway Truck"


class TransactionType(models.TextChoices):
    VEHICLE_TO_SITE = "vehicle_to_site", "Dropped Off"
    SITE_TO_VEHICLE = "site_to_vehicle", "Picked Up"
    AUDIT_ADJUSTMENT = "audit_adjustment", "Audit Adjustment"


class ItemStatus(models.TextChoices):
    """Condition of the units recorded on a ledger transaction."""

    ACTIVE = "active", "Active"
    DAMAGED = "damaged", "Damaged"
    MISSING = "missing", "Missing"
    STOLEN = "stolen", "Stolen"
    DISPOSED = "disposed", "Disposed"


class StockStatus(models.TextChoices):
    OUT_OF_STOCK = "out_of_stock", "Out of Stock"
    LOW_STOCK = "low_stock", "Low Stock"
    ADEQUATE = "adequate", "Adequate"
    EXCESS = "excess", "Excess"
