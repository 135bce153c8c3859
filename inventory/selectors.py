"""Selectors for the inventory ledger.

Read-only helpers over the projection and the transaction log. History
querysets are always ordered newest first with the sequence number as the
tie-breaker, so paging over them is stable.
"""

from typing import Dict, List, Optional

from catalog.models import InventoryItem
from common.choices import StockStatus
from django.conf import settings
from django.db.models import Q, QuerySet
from locations.models import Location, Site, Vehicle

from .exceptions import NotFoundError
from .models import StockLevel, Transaction


def get_site(site_id) -> Site:
    try:
        return Site.objects.get(id=site_id)
    except (Site.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Site {site_id} not found", location_id=site_id)


def get_vehicle(vehicle_id) -> Vehicle:
    try:
        return Vehicle.objects.get(id=vehicle_id)
    except (Vehicle.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Vehicle {vehicle_id} not found", location_id=vehicle_id)


def project_stock(location_id: int) -> Dict[int, int]:
    """Current on-hand quantities at a location as {item_id: quantity}."""

    if not Location.objects.filter(id=location_id).exists():
        raise NotFoundError(f"Location {location_id} not found", location_id=location_id)
    rows = StockLevel.objects.filter(location_id=location_id, quantity__gt=0).values_list("item_id", "quantity")
    return {item_id: int(qty) for item_id, qty in rows}


def list_stock_at_location(location_id: int) -> QuerySet[StockLevel]:
    return (
        StockLevel.objects.filter(location_id=location_id, quantity__gt=0)
        .select_related("item")
        .order_by("item__name", "item_id")
    )


def stock_status(available: int, required: int) -> str:
    """Classify on-hand stock against a target quantity for display."""

    ratio = float(getattr(settings, "INVENTORY_LOW_STOCK_RATIO", 1.0))
    if available <= 0:
        return StockStatus.OUT_OF_STOCK
    if available < required * ratio:
        return StockStatus.LOW_STOCK
    if available <= required:
        return StockStatus.ADEQUATE
    return StockStatus.EXCESS


def list_vehicle_inventory(vehicle: Vehicle) -> List[dict]:
    """Stock on a vehicle merged with the targets for its vehicle class.

    Items with a non-zero target are listed even when none are on board.
    """

    on_hand = {s.item_id: s for s in list_stock_at_location(vehicle.id)}
    required_field = "lct_required_qty" if vehicle.vehicle_class == Vehicle.CLASS_LCT else "hwy_required_qty"
    items = InventoryItem.objects.filter(
        Q(id__in=list(on_hand)) | Q(status=InventoryItem.STATUS_ACTIVE, **{f"{required_field}__gt": 0})
    ).order_by("name", "id")
    rows = []
    for item in items:
        quantity = int(on_hand[item.id].quantity) if item.id in on_hand else 0
        required = item.required_quantity_for(vehicle.vehicle_class)
        rows.append(
            {
                "item": item,
                "quantity": quantity,
                "required_quantity": required,
                "stock_status": stock_status(quantity, required),
            }
        )
    return rows


def _filter_history(
    qs: QuerySet[Transaction],
    *,
    transaction_type: Optional[str] = None,
    item_status: Optional[str] = None,
    created_after=None,
    created_before=None,
    item_id: Optional[int] = None,
) -> QuerySet[Transaction]:
    if transaction_type:
        qs = qs.filter(transaction_type=transaction_type)
    if item_status:
        qs = qs.filter(item_status=item_status)
    if created_after:
        qs = qs.filter(created_at__gte=created_after)
    if created_before:
        qs = qs.filter(created_at__lte=created_before)
    if item_id:
        qs = qs.filter(item_id=item_id)
    return qs


def _history_base() -> QuerySet[Transaction]:
    return Transaction.objects.select_related(
        "item", "source_location", "dest_location", "submitted_by"
    ).order_by("-created_at", "-id")


def history(location_id: int, **filters) -> QuerySet[Transaction]:
    """Every transaction touching a location, newest first."""

    qs = _history_base().filter(Q(source_location_id=location_id) | Q(dest_location_id=location_id))
    return _filter_history(qs, **filters)


def item_history(item_id: int, **filters) -> QuerySet[Transaction]:
    """Per-item audit trail across all locations, newest first."""

    qs = _history_base().filter(item_id=item_id)
    return _filter_history(qs, **filters)


def list_item_holdings(item_id: int) -> QuerySet[StockLevel]:
    """Locations currently holding the item."""

    return (
        StockLevel.objects.filter(item_id=item_id, quantity__gt=0)
        .select_related("location")
        .order_by("location__kind", "location__name", "location_id")
    )


def actor_display_name(user) -> str:
    if user is None:
        return "System"
    full = (user.get_full_name() or "").strip() if hasattr(user, "get_full_name") else ""
    return full or getattr(user, "username", "") or "System"
