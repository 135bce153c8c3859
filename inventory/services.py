"""Inventory services: transfers and audit reconciliation over the ledger.

These are the only callers of ``ledger.append``. Each public service call is
one atomic unit: every transaction it records commits together with the
projection update, or nothing is recorded at all.
"""

import functools
import logging
import threading
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from catalog.models import InventoryItem
from common.choices import ItemStatus, TransactionType
from django.conf import settings
from django.db import OperationalError, connection, transaction
from locations.models import Location, Vehicle

from . import ledger
from .exceptions import ConcurrencyConflictError, NotFoundError, ValidationError
from .models import Transaction
from .selectors import get_site, get_vehicle, project_stock

logger = logging.getLogger("fieldstock.inventory")


class _External:
    """Office pool outside the tracked locations."""

    def __repr__(self) -> str:  # pragma: no cover
        return "EXTERNAL"


# Pass as a source to stock a vehicle from the office pool, or as a
# destination to return units to it. Recorded as a null location.
EXTERNAL = _External()

TRANSFER_STATUSES = (ItemStatus.ACTIVE, ItemStatus.DAMAGED, ItemStatus.MISSING)
SHORTFALL_STATUSES = (ItemStatus.MISSING, ItemStatus.DAMAGED, ItemStatus.STOLEN, ItemStatus.DISPOSED)

# SQLSTATE serialization_failure / deadlock_detected
_CONFLICT_SQLSTATES = {"40001", "40P01"}


def _is_conflict(exc: OperationalError) -> bool:
    cause = exc.__cause__
    code = getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)
    if code in _CONFLICT_SQLSTATES:
        return True
    message = str(exc).lower()
    return "database is locked" in message or "deadlock" in message


_retry_state = threading.local()


def retry_on_conflict(func):
    """Run ``func`` atomically, retrying lock conflicts a bounded number of times.

    Only the outermost decorated call retries; nested calls run inside its
    transaction. Inside a caller's own transaction the failed attempt cannot
    be rolled back on its own, so the conflict is surfaced immediately.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if getattr(_retry_state, "active", False):
            return func(*args, **kwargs)
        attempts = 1 if connection.in_atomic_block else max(1, int(getattr(settings, "INVENTORY_CONFLICT_RETRIES", 3)))
        last_exc = None
        _retry_state.active = True
        try:
            for attempt in range(1, attempts + 1):
                try:
                    with transaction.atomic():
                        return func(*args, **kwargs)
                except OperationalError as exc:
                    if not _is_conflict(exc):
                        raise
                    last_exc = exc
                    logger.warning(
                        "inventory.write_conflict",
                        extra={"event": "inventory.write_conflict", "operation": func.__name__, "attempt": attempt},
                    )
        finally:
            _retry_state.active = False
        raise ConcurrencyConflictError("Stock is being updated by another request; try again") from last_exc

    return wrapper


def _resolve_endpoint(location_id, role: str) -> Optional[Location]:
    if location_id is EXTERNAL:
        return None
    if location_id is None:
        raise ValidationError(f"{role} location is required; use EXTERNAL for the office pool")
    return ledger.get_location(location_id)


def transfer_type_for(source: Optional[Location], dest: Optional[Location]) -> str:
    """Derive the transaction type from the kinds of the two endpoints."""

    if source is not None and source.is_vehicle and (dest is None or dest.is_site):
        return TransactionType.VEHICLE_TO_SITE
    if (source is None or source.is_site) and dest is not None and dest.is_vehicle:
        return TransactionType.SITE_TO_VEHICLE
    raise ValidationError("Transfers move stock between a site and a vehicle")


def _check_transfer(*, source_location_id, dest_location_id, item_status) -> Tuple[Optional[Location], Optional[Location], str]:
    if item_status not in TRANSFER_STATUSES:
        raise ValidationError(f"Item status {item_status!r} is not allowed on a transfer")
    source = _resolve_endpoint(source_location_id, "Source")
    dest = _resolve_endpoint(dest_location_id, "Destination")
    if source is None and dest is None:
        raise ValidationError("Source and destination cannot both be the office pool")
    if source is not None and dest is not None and source.id == dest.id:
        raise ValidationError("Source and destination must differ")
    return source, dest, transfer_type_for(source, dest)


def _normalize_lines(items: Iterable[Tuple[int, int]]) -> List[Tuple[int, int]]:
    lines = []
    seen = set()
    for item_id, quantity in items:
        if item_id in seen:
            raise ValidationError(f"Inventory item {item_id} is listed more than once", item_id=item_id)
        seen.add(item_id)
        lines.append((item_id, ledger.validate_quantity(quantity)))
    if not lines:
        raise ValidationError("At least one item is required")
    return lines


def _load_items(item_ids: Iterable[int]) -> Dict[int, InventoryItem]:
    ids = list(item_ids)
    found = InventoryItem.objects.in_bulk(ids)
    for item_id in ids:
        if item_id not in found:
            raise NotFoundError(f"Inventory item {item_id} not found", item_id=item_id)
    return found


@retry_on_conflict
def transfer_items(
    *,
    items: Sequence[Tuple[int, int]],
    source_location_id,
    dest_location_id,
    submitted_by=None,
    job_id: str = "",
    item_status: str = ItemStatus.ACTIVE,
    notes: str = "",
) -> List[Transaction]:
    """Move several items between the same two endpoints as one unit.

    ``items`` is a sequence of (item_id, quantity). Either endpoint may be
    ``EXTERNAL``. Fails as a whole with InsufficientStockError if any line
    exceeds the stock at the source.
    """

    lines = _normalize_lines(items)
    source, dest, txn_type = _check_transfer(
        source_location_id=source_location_id,
        dest_location_id=dest_location_id,
        item_status=item_status,
    )
    found = _load_items(item_id for item_id, _ in lines)
    if source is None:
        retired = [item_id for item_id, _ in lines if not found[item_id].is_active]
        if retired:
            raise ValidationError("Retired items cannot be stocked from the office pool", item_ids=retired)

    endpoints = [loc.id for loc in (source, dest) if loc is not None]
    ledger.lock_stock_levels((item_id, loc_id) for item_id, _ in lines for loc_id in endpoints)

    txns = [
        ledger.append(
            item_id=item_id,
            quantity=quantity,
            transaction_type=txn_type,
            source_location_id=source.id if source else None,
            dest_location_id=dest.id if dest else None,
            submitted_by=submitted_by,
            item_status=item_status,
            job_id=job_id,
            notes=notes,
        )
        for item_id, quantity in lines
    ]
    logger.info(
        "inventory.transfer_recorded",
        extra={
            "event": "inventory.transfer_recorded",
            "transaction_type": txn_type,
            "source_location_id": source.id if source else None,
            "dest_location_id": dest.id if dest else None,
            "user_id": getattr(submitted_by, "id", None),
            "job_id": job_id or None,
            "lines": len(txns),
            "transaction_ids": [t.id for t in txns],
        },
    )
    return txns


def transfer(
    *,
    item_id: int,
    quantity: int,
    source_location_id,
    dest_location_id,
    submitted_by=None,
    job_id: str = "",
    item_status: str = ItemStatus.ACTIVE,
    notes: str = "",
) -> Transaction:
    """Move ``quantity`` units of one item from source to destination."""

    (txn,) = transfer_items(
        items=[(item_id, quantity)],
        source_location_id=source_location_id,
        dest_location_id=dest_location_id,
        submitted_by=submitted_by,
        job_id=job_id,
        item_status=item_status,
        notes=notes,
    )
    return txn


@retry_on_conflict
def submit_audit(
    *,
    location_id: int,
    counts: Mapping[int, int],
    submitted_by=None,
    is_audit: bool = True,
    item_status: str = ItemStatus.MISSING,
    notes: str = "",
) -> List[Transaction]:
    """Reconcile the projection with a physical count at one location.

    Deltas are computed against the projection at commit time. Items already
    at their counted quantity produce no transaction, so resubmitting the same
    count is a no-op. ``item_status`` labels shortfalls; surpluses are always
    recorded as active stock.
    """

    location = ledger.get_location(location_id)
    if item_status not in SHORTFALL_STATUSES:
        raise ValidationError(f"Item status {item_status!r} cannot label an audit shortfall")
    normalized = {}
    for item_id, counted in counts.items():
        if isinstance(counted, bool) or not isinstance(counted, int) or counted < 0:
            raise ValidationError("Counted quantity must be a non-negative integer", item_id=item_id)
        normalized[item_id] = counted
    _load_items(normalized)

    levels = ledger.lock_stock_levels((item_id, location.id) for item_id in normalized)
    txns = []
    for item_id in sorted(normalized):
        projected = int(levels[(item_id, location.id)].quantity)
        delta = normalized[item_id] - projected
        if delta == 0:
            continue
        if delta > 0:
            txn = ledger.append(
                item_id=item_id,
                quantity=delta,
                transaction_type=TransactionType.AUDIT_ADJUSTMENT,
                dest_location_id=location.id,
                submitted_by=submitted_by,
                item_status=ItemStatus.ACTIVE,
                is_audit=is_audit,
                notes=notes,
            )
        else:
            txn = ledger.append(
                item_id=item_id,
                quantity=-delta,
                transaction_type=TransactionType.AUDIT_ADJUSTMENT,
                source_location_id=location.id,
                submitted_by=submitted_by,
                item_status=item_status,
                is_audit=is_audit,
                notes=notes,
            )
        txns.append(txn)

    logger.info(
        "inventory.audit_submitted",
        extra={
            "event": "inventory.audit_submitted",
            "location_id": location.id,
            "user_id": getattr(submitted_by, "id", None),
            "is_audit": is_audit,
            "counted_items": len(normalized),
            "adjustments": len(txns),
        },
    )
    return txns


@retry_on_conflict
def report_item_status(
    *,
    location_id: int,
    item_id: int,
    status: str,
    quantity: int,
    submitted_by=None,
    notes: str = "",
) -> Transaction:
    """Write off units found damaged, missing, stolen or disposed at a location."""

    if status not in SHORTFALL_STATUSES:
        raise ValidationError(f"Cannot report items as {status!r}")
    location = ledger.get_location(location_id)
    txn = ledger.append(
        item_id=item_id,
        quantity=quantity,
        transaction_type=TransactionType.AUDIT_ADJUSTMENT,
        source_location_id=location.id,
        submitted_by=submitted_by,
        item_status=status,
        notes=notes,
    )
    logger.info(
        "inventory.status_reported",
        extra={
            "event": "inventory.status_reported",
            "location_id": location.id,
            "item_id": item_id,
            "status": status,
            "quantity": quantity,
            "user_id": getattr(submitted_by, "id", None),
        },
    )
    return txn


# Vehicle flows


def add_to_vehicle(
    *,
    vehicle_id: int,
    items: Sequence[Tuple[int, int]],
    source_site_id: Optional[int] = None,
    submitted_by=None,
    job_id: str = "",
) -> List[Transaction]:
    """Load items onto a vehicle from a site, or from the office pool if no site is given."""

    vehicle = get_vehicle(vehicle_id)
    source = get_site(source_site_id).id if source_site_id is not None else EXTERNAL
    return transfer_items(
        items=items,
        source_location_id=source,
        dest_location_id=vehicle.id,
        submitted_by=submitted_by,
        job_id=job_id,
    )


def drop_off(
    *,
    vehicle_id: int,
    items: Sequence[Tuple[int, int]],
    destination_site_id: Optional[int] = None,
    submitted_by=None,
    job_id: str = "",
) -> List[Transaction]:
    """Unload items from a vehicle at a site, or back to the office pool."""

    vehicle = get_vehicle(vehicle_id)
    dest = get_site(destination_site_id).id if destination_site_id is not None else EXTERNAL
    return transfer_items(
        items=items,
        source_location_id=vehicle.id,
        dest_location_id=dest,
        submitted_by=submitted_by,
        job_id=job_id,
    )


@retry_on_conflict
def set_vehicle_quantities(
    *,
    vehicle_id: int,
    targets: Mapping[int, int],
    submitted_by=None,
    job_id: str = "",
) -> List[Transaction]:
    """Bring on-board quantities to the given targets via the office pool.

    Shortfalls are pulled from the pool and excess is returned to it, as
    ordinary transfers rather than audit adjustments.
    """

    vehicle = get_vehicle(vehicle_id)
    for item_id, target in targets.items():
        if isinstance(target, bool) or not isinstance(target, int) or target < 0:
            raise ValidationError("Quantity cannot be negative", item_id=item_id)
    _load_items(targets)

    levels = ledger.lock_stock_levels((item_id, vehicle.id) for item_id in targets)
    incoming, outgoing = [], []
    for item_id in sorted(targets):
        delta = targets[item_id] - int(levels[(item_id, vehicle.id)].quantity)
        if delta > 0:
            incoming.append((item_id, delta))
        elif delta < 0:
            outgoing.append((item_id, -delta))

    txns = []
    if incoming:
        txns += transfer_items(
            items=incoming,
            source_location_id=EXTERNAL,
            dest_location_id=vehicle.id,
            submitted_by=submitted_by,
            job_id=job_id,
        )
    if outgoing:
        txns += transfer_items(
            items=outgoing,
            source_location_id=vehicle.id,
            dest_location_id=EXTERNAL,
            submitted_by=submitted_by,
            job_id=job_id,
        )
    return txns


@retry_on_conflict
def remove_vehicle_item(*, vehicle_id: int, item_id: int, submitted_by=None) -> Optional[Transaction]:
    """Return everything of one item on a vehicle to the office pool."""

    vehicle = get_vehicle(vehicle_id)
    ledger.get_item(item_id)
    level = ledger.lock_stock_levels([(item_id, vehicle.id)])[(item_id, vehicle.id)]
    if int(level.quantity) == 0:
        return None
    return transfer(
        item_id=item_id,
        quantity=int(level.quantity),
        source_location_id=vehicle.id,
        dest_location_id=EXTERNAL,
        submitted_by=submitted_by,
    )


def stock_new_vehicle(*, vehicle: Vehicle, submitted_by=None) -> List[Transaction]:
    """Auto-stock a vehicle from the office pool up to its class targets."""

    field = "lct_required_qty" if vehicle.vehicle_class == Vehicle.CLASS_LCT else "hwy_required_qty"
    on_hand = project_stock(vehicle.id)
    lines = []
    for item in InventoryItem.objects.filter(status=InventoryItem.STATUS_ACTIVE, **{f"{field}__gt": 0}).order_by("id"):
        shortfall = item.required_quantity_for(vehicle.vehicle_class) - on_hand.get(item.id, 0)
        if shortfall > 0:
            lines.append((item.id, shortfall))
    if not lines:
        return []
    txns = transfer_items(
        items=lines,
        source_location_id=EXTERNAL,
        dest_location_id=vehicle.id,
        submitted_by=submitted_by,
        notes="Auto-stocked from vehicle class targets",
    )
    logger.info(
        "inventory.vehicle_stocked",
        extra={"event": "inventory.vehicle_stocked", "vehicle_id": vehicle.id, "lines": len(txns)},
    )
    return txns
