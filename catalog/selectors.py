"""Selectors for the equipment catalog.

Read-only query helpers shared by the catalog views and the admin API.
"""

from typing import Iterable, Optional

from django.db.models import IntegerField, OuterRef, Q, QuerySet, Subquery, Sum
from django.db.models.functions import Coalesce
from inventory.models import StockLevel

from .models import InventoryItem


def _on_hand_subquery():
    totals = (
        StockLevel.objects.filter(item_id=OuterRef("pk"))
        .order_by()
        .values("item_id")
        .annotate(total=Sum("quantity"))
        .values("total")[:1]
    )
    return Coalesce(Subquery(totals, output_field=IntegerField()), 0)


def list_items(
    *,
    type: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    ordering: Optional[Iterable[str]] = None,
) -> QuerySet[InventoryItem]:
    """Return catalog items annotated with ``on_hand``, the total across all locations."""

    qs = InventoryItem.objects.annotate(on_hand=_on_hand_subquery())
    if type:
        qs = qs.filter(type=type)
    if status:
        qs = qs.filter(status=status)
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(sku__icontains=search) | Q(description__icontains=search))
    ordering = list(ordering or ("name", "id"))
    return qs.order_by(*ordering)
