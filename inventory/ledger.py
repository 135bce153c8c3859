"""Stock ledger core: append-only transactions plus the StockLevel projection.

``append`` is the only writer of both tables. The projection rows it touches
are locked in (item_id, location_id) order, so concurrent writers on the same
pair serialize while writers on disjoint pairs never wait on each other.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from catalog.models import InventoryItem
from common.choices import ItemStatus, TransactionType
from django.conf import settings
from django.db import transaction
from django.db.models import Q
from locations.models import Location

from .exceptions import InsufficientStockError, NotFoundError, ValidationError
from .models import StockLevel, Transaction

logger = logging.getLogger("fieldstock.inventory")

Pair = Tuple[int, int]


def max_quantity() -> int:
    return int(getattr(settings, "INVENTORY_MAX_QUANTITY", 1_000_000))


def validate_quantity(quantity) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer")
    if quantity <= 0:
        raise ValidationError("Quantity must be positive")
    limit = max_quantity()
    if quantity > limit:
        raise ValidationError(f"Quantity cannot exceed {limit}", max_quantity=limit)
    return quantity


def get_item(item_id) -> InventoryItem:
    try:
        return InventoryItem.objects.get(id=item_id)
    except (InventoryItem.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Inventory item {item_id} not found", item_id=item_id)


def get_location(location_id) -> Location:
    try:
        return Location.objects.get(id=location_id)
    except (Location.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Location {location_id} not found", location_id=location_id)


def _validate_entry(*, transaction_type, item_status, source_location_id, dest_location_id) -> None:
    if transaction_type not in TransactionType.values:
        raise ValidationError(f"Unknown transaction type: {transaction_type}")
    if item_status not in ItemStatus.values:
        raise ValidationError(f"Unknown item status: {item_status}")
    if source_location_id is None and dest_location_id is None:
        raise ValidationError("A transaction needs a source or a destination")
    if source_location_id is not None and source_location_id == dest_location_id:
        raise ValidationError("Source and destination must differ")
    if transaction_type == TransactionType.AUDIT_ADJUSTMENT:
        if source_location_id is not None and dest_location_id is not None:
            raise ValidationError("Audit adjustments credit or debit a single location")


def lock_stock_levels(pairs: Iterable[Pair]) -> Dict[Pair, StockLevel]:
    """Get-or-create and row-lock projection rows for the given pairs.

    Must run inside ``transaction.atomic``. Rows are locked in sorted order
    so overlapping batches acquire locks in the same sequence.
    """

    levels = {}
    for item_id, location_id in sorted(set(pairs)):
        level, _ = StockLevel.objects.select_for_update().get_or_create(item_id=item_id, location_id=location_id)
        levels[(item_id, location_id)] = level
    return levels


@transaction.atomic
def append(
    *,
    item_id: int,
    quantity: int,
    transaction_type: str,
    source_location_id: Optional[int] = None,
    dest_location_id: Optional[int] = None,
    submitted_by=None,
    item_status: str = ItemStatus.ACTIVE,
    job_id: str = "",
    is_audit: bool = False,
    notes: str = "",
) -> Transaction:
    """Persist one immutable transaction and apply it to the projection.

    Raises ValidationError (or NotFoundError) before touching any row, and
    InsufficientStockError if the source would go negative.
    """

    validate_quantity(quantity)
    _validate_entry(
        transaction_type=transaction_type,
        item_status=item_status,
        source_location_id=source_location_id,
        dest_location_id=dest_location_id,
    )
    item = get_item(item_id)
    for location_id in (source_location_id, dest_location_id):
        if location_id is not None:
            get_location(location_id)

    pairs = [(item.id, loc) for loc in (source_location_id, dest_location_id) if loc is not None]
    levels = lock_stock_levels(pairs)

    if dest_location_id is not None:
        held = int(levels[(item.id, dest_location_id)].quantity)
        if held + quantity > max_quantity():
            raise ValidationError(
                f"Location cannot hold more than {max_quantity()} of this item",
                item_id=item.id,
                location_id=dest_location_id,
                max_quantity=max_quantity(),
            )

    if source_location_id is not None:
        source = levels[(item.id, source_location_id)]
        if int(source.quantity) < quantity:
            raise InsufficientStockError(
                item_id=item.id,
                location_id=source_location_id,
                requested=quantity,
                available=int(source.quantity),
            )
        source.quantity = int(source.quantity) - quantity
        source.save(update_fields=["quantity", "updated_at"])
    if dest_location_id is not None:
        dest = levels[(item.id, dest_location_id)]
        dest.quantity = int(dest.quantity) + quantity
        dest.save(update_fields=["quantity", "updated_at"])

    txn = Transaction.objects.create(
        item=item,
        quantity=quantity,
        transaction_type=transaction_type,
        source_location_id=source_location_id,
        dest_location_id=dest_location_id,
        submitted_by=submitted_by,
        item_status=item_status,
        job_id=job_id or "",
        is_audit=is_audit,
        notes=notes or "",
    )
    logger.debug(
        "inventory.transaction_appended",
        extra={
            "event": "inventory.transaction_appended",
            "transaction_id": txn.id,
            "item_id": item.id,
            "quantity": quantity,
            "transaction_type": transaction_type,
            "source_location_id": source_location_id,
            "dest_location_id": dest_location_id,
        },
    )
    return txn


def replay_stock(location_id: Optional[int] = None) -> Dict[Pair, int]:
    """Fold the ledger in sequence order into {(item_id, location_id): quantity}.

    Pairs that net to zero are omitted, matching ``project_stock``.
    """

    qs = Transaction.objects.order_by("id")
    if location_id is not None:
        qs = qs.filter(Q(source_location_id=location_id) | Q(dest_location_id=location_id))
    totals: Dict[Pair, int] = defaultdict(int)
    rows = qs.values_list("item_id", "quantity", "source_location_id", "dest_location_id")
    for item_id, quantity, source_id, dest_id in rows.iterator(chunk_size=2000):
        if source_id is not None:
            totals[(item_id, source_id)] -= int(quantity)
        if dest_id is not None:
            totals[(item_id, dest_id)] += int(quantity)
    if location_id is not None:
        return {k: v for k, v in totals.items() if k[1] == location_id and v != 0}
    return {k: v for k, v in totals.items() if v != 0}


def find_projection_drift(location_id: Optional[int] = None) -> List[dict]:
    """Return every pair where the projection disagrees with a full replay."""

    replayed = replay_stock(location_id)
    qs = StockLevel.objects.exclude(quantity=0)
    if location_id is not None:
        qs = qs.filter(location_id=location_id)
    projected = {(s.item_id, s.location_id): int(s.quantity) for s in qs}
    drift = []
    for pair in sorted(set(replayed) | set(projected)):
        expected = replayed.get(pair, 0)
        actual = projected.get(pair, 0)
        if expected != actual:
            drift.append({"item_id": pair[0], "location_id": pair[1], "expected": expected, "actual": actual})
    return drift


@transaction.atomic
def rebuild_stock_levels() -> int:
    """Rewrite the projection from a full replay. Returns rows corrected."""

    existing = {(s.item_id, s.location_id): s for s in StockLevel.objects.select_for_update().order_by("id")}
    replayed = replay_stock()
    corrected = 0
    for pair, level in existing.items():
        expected = replayed.get(pair, 0)
        if int(level.quantity) != expected:
            level.quantity = expected
            level.save(update_fields=["quantity", "updated_at"])
            corrected += 1
    for (item_id, location_id), expected in replayed.items():
        if (item_id, location_id) not in existing:
            StockLevel.objects.create(item_id=item_id, location_id=location_id, quantity=expected)
            corrected += 1
    if corrected:
        logger.warning(
            "inventory.projection_rebuilt",
            extra={"event": "inventory.projection_rebuilt", "corrected": corrected},
        )
    return corrected
