"""Admin registration for sites and vehicles."""

from django.contrib import admin

from .models import Site, Vehicle


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "province", "is_active")
    search_fields = ("name", "street", "city")
    list_filter = ("is_active", "province")


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("name", "unit_number", "license_plate", "vehicle_class", "driver", "is_active")
    search_fields = ("name", "license_plate", "unit_number")
    list_filter = ("vehicle_class", "is_active")
    raw_id_fields = ("driver",)
