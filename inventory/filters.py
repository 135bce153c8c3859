"""FilterSets for ledger history endpoints."""

import django_filters
from common.choices import ItemStatus, TransactionType

from .models import Transaction


class TransactionFilter(django_filters.FilterSet):
    transaction_type = django_filters.ChoiceFilter(choices=TransactionType.choices)
    item_status = django_filters.ChoiceFilter(choices=ItemStatus.choices)
    created_after = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")
    is_audit = django_filters.BooleanFilter()

    class Meta:
        model = Transaction
        fields = ["transaction_type", "item_status", "created_after", "created_before", "is_audit"]
