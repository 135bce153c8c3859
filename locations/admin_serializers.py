"""Admin serializers for site and vehicle write endpoints."""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Site, Vehicle


class SiteAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = Site
        fields = ["id", "kind", "name", "street", "city", "province", "postal_code", "is_active"]
        read_only_fields = ["kind"]


class VehicleAdminSerializer(serializers.ModelSerializer):
    driver = serializers.PrimaryKeyRelatedField(queryset=get_user_model().objects.all(), required=False, allow_null=True)
    auto_stock = serializers.BooleanField(
        write_only=True,
        required=False,
        default=False,
        help_text="On create, load the vehicle from the office pool up to its class targets.",
    )

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
            "is_active",
            "auto_stock",
        ]
        read_only_fields = ["kind"]

    def create(self, validated_data):
        validated_data.pop("auto_stock", None)
        return super().create(validated_data)

    def update(self, instance, validated_data):
        validated_data.pop("auto_stock", None)
        return super().update(instance, validated_data)
