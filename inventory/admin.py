"""Admin registrations for the inventory ledger.

Both models are read-only here: transactions are immutable and stock levels
are only written by the ledger.
"""

from django.contrib import admin

from .models import StockLevel, Transaction


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(StockLevel)
class StockLevelAdmin(ReadOnlyAdmin):
    list_display = ("id", "item", "location", "quantity", "updated_at")
    list_filter = ("location__kind",)
    search_fields = ("item__name", "item__sku", "location__name")


@admin.register(Transaction)
class TransactionAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "item",
        "quantity",
        "transaction_type",
        "source_location",
        "dest_location",
        "item_status",
        "submitted_by",
        "job_id",
        "created_at",
    )
    list_filter = ("transaction_type", "item_status", "is_audit")
    search_fields = ("item__name", "item__sku", "job_id")
    date_hierarchy = "created_at"


# EOF
