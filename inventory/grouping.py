"""History grouping: collapse ledger transactions into display events.

A worker dropping ten different items at a site in one go produces ten
transactions; the history feed shows them as one event. Everything here is a
pure function of its input: the transactions are re-sorted newest first
(sequence number breaking ties) before grouping, so the same set always
yields the same groups whatever order it arrives in.

Transactions only need ``id``, ``transaction_type``, ``created_at``,
``submitted_by_id``, ``item_id`` and ``item_status`` attributes; saved or
unsaved model instances both work.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from django.conf import settings


@dataclass
class HistoryGroup:
    key: str
    transaction_type: str
    submitted_by_id: Optional[int]
    display_actor: str
    created_at: datetime
    job_id: str = ""
    items: list = field(default_factory=list)

    @property
    def latest_sequence(self) -> int:
        return max((t.id or 0) for t in self.items) if self.items else 0

    def has_status(self, item_status: str) -> bool:
        return any(t.item_status == item_status for t in self.items)


def _window_seconds(window_seconds: Optional[float]) -> float:
    if window_seconds is None:
        window_seconds = getattr(settings, "INVENTORY_HISTORY_GROUP_WINDOW_SECONDS", 5)
    if window_seconds <= 0:
        raise ValueError("Grouping window must be positive")
    return float(window_seconds)


def sort_newest_first(transactions: Iterable) -> list:
    return sorted(transactions, key=lambda t: (t.created_at, t.id or 0), reverse=True)


def _display_actor(txn) -> str:
    # Imported lazily to keep this module free of ORM imports at load time
    from .selectors import actor_display_name

    if txn.submitted_by_id is None:
        return "System"
    return actor_display_name(getattr(txn, "submitted_by", None))


def group_transactions(
    transactions: Iterable,
    *,
    window_seconds: Optional[float] = None,
    split_by_counterpart_of: Optional[int] = None,
) -> List[HistoryGroup]:
    """Group transactions by (type, time bucket, submitter).

    The bucket is ``floor(epoch_seconds / window_seconds)``. When
    ``split_by_counterpart_of`` is a location id, transactions are also split
    by the other endpoint relative to that location, so a vehicle feed keeps
    drop-offs at two different sites apart.
    """

    window = _window_seconds(window_seconds)
    groups = {}
    order: List[Tuple] = []
    for txn in sort_newest_first(transactions):
        bucket = int(txn.created_at.timestamp() // window)
        key = (txn.transaction_type, bucket, txn.submitted_by_id)
        if split_by_counterpart_of is not None:
            key += (txn.counterpart_location_id(split_by_counterpart_of),)
        group = groups.get(key)
        if group is None:
            group = HistoryGroup(
                key=":".join("" if part is None else str(part) for part in key),
                transaction_type=txn.transaction_type,
                submitted_by_id=txn.submitted_by_id,
                display_actor=_display_actor(txn),
                created_at=txn.created_at,
                job_id=getattr(txn, "job_id", "") or "",
            )
            groups[key] = group
            order.append(key)
        group.items.append(txn)
        if not group.job_id and getattr(txn, "job_id", ""):
            group.job_id = txn.job_id
    result = [groups[k] for k in order]
    # Members are visited newest first, so each group's created_at is its newest member
    result.sort(key=lambda g: (g.created_at, g.latest_sequence), reverse=True)
    return result


def filter_transactions(
    transactions: Iterable,
    *,
    transaction_type: Optional[str] = None,
    item_status: Optional[str] = None,
) -> list:
    """Narrow transactions before grouping."""

    result = []
    for txn in transactions:
        if transaction_type and txn.transaction_type != transaction_type:
            continue
        if item_status and txn.item_status != item_status:
            continue
        result.append(txn)
    return result


def filter_groups(
    groups: Iterable[HistoryGroup],
    *,
    transaction_type: Optional[str] = None,
    item_status: Optional[str] = None,
) -> List[HistoryGroup]:
    """Narrow whole groups; a group matches a status if any member carries it."""

    result = []
    for group in groups:
        if transaction_type and group.transaction_type != transaction_type:
            continue
        if item_status and not group.has_status(item_status):
            continue
        result.append(group)
    return result


def paginate_groups(groups: Sequence[HistoryGroup], *, limit: int, offset: int = 0) -> Tuple[int, List[HistoryGroup]]:
    """Return (total_count, page) for limit/offset paging over groups."""

    offset = max(0, int(offset))
    limit = max(0, int(limit))
    return len(groups), list(groups[offset : offset + limit])


def transactions_for_item(transactions: Iterable, item_id: int) -> list:
    """Every transaction touching one item, newest first, regardless of group."""

    return sort_newest_first(t for t in transactions if t.item_id == item_id)
