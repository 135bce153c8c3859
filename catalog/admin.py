"""Admin registration for catalog models."""

from django.contrib import admin

from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "type", "status", "lct_required_qty", "hwy_required_qty", "billable")
    search_fields = ("name", "sku")
    list_filter = ("type", "status", "billable")

    def get_readonly_fields(self, request, obj=None):
        if obj is not None and obj.is_referenced():
            return InventoryItem.LOCKED_FIELDS
        return ()
