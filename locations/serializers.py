"""Read serializers for sites and vehicles."""

from inventory.selectors import actor_display_name
from rest_framework import serializers

from .models import Site, Vehicle


class SiteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Site
        fields = ["id", "kind", "name", "street", "city", "province", "postal_code", "display_address", "is_active"]
        read_only_fields = fields


class VehicleSerializer(serializers.ModelSerializer):
    driver_name = serializers.SerializerMethodField()

    class Meta:
        model = Vehicle
        fields = [
            "id",
            "kind",
            "name",
            "license_plate",
            "unit_number",
            "vehicle_class",
            "driver",
            "driver_name",
            "is_active",
        ]
        read_only_fields = fields

    def get_driver_name(self, obj):
        return actor_display_name(obj.driver) if obj.driver_id else None
