"""Seed catalog, locations and starting stock for local development.

Re-running is idempotent: items are reused by SKU, sites and vehicles by
name, and vehicles are only topped up to their class targets.
"""

from catalog.models import InventoryItem
from common.choices import ItemType, VehicleClass
from django.core.management.base import BaseCommand
from django.db import transaction
from inventory.services import stock_new_vehicle
from locations.models import Site, Vehicle

ITEMS = [
    {"name": "Cone 18in", "sku": "CONE-18", "type": ItemType.CONE, "lct": 20, "hwy": 10},
    {"name": "Cone 28in", "sku": "CONE-28", "type": ItemType.CONE, "lct": 30, "hwy": 20},
    {"name": "Drum", "sku": "DRUM-42", "type": ItemType.DRUM, "lct": 10, "hwy": 6},
    {"name": "Barricade Light", "sku": "BARR-LT", "type": ItemType.BARRICADE, "lct": 10, "hwy": 4},
    {
        "name": "Road Work Ahead",
        "sku": "SIGN-C1",
        "type": ItemType.SIGN,
        "lct": 2,
        "hwy": 2,
        "width_mm": 900,
        "height_mm": 900,
        "reflectivity_astm_type": "IX",
    },
    {"name": "Arrow Board", "sku": "MSG-ARROW", "type": ItemType.MESSAGE_BOARD, "lct": 1, "hwy": 0},
]

SITES = [
    {"name": "Highway 401 Exit 320", "city": "Kingston", "province": "ON"},
    {"name": "Princess St Resurfacing", "city": "Kingston", "province": "ON"},
]

VEHICLES = [
    {"name": "Truck 12", "license_plate": "AB12 345", "unit_number": "12", "vehicle_class": VehicleClass.LCT},
    {"name": "Truck 7", "license_plate": "CD78 901", "unit_number": "7", "vehicle_class": VehicleClass.HWY},
]


class Command(BaseCommand):
    help = "Seed catalog items, sites and vehicles, and stock vehicles to their class targets"

    def add_arguments(self, parser):
        parser.add_argument("--no-stock", action="store_true", help="Skip auto-stocking the seeded vehicles")

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")

        for entry in ITEMS:
            InventoryItem.objects.get_or_create(
                sku=entry["sku"],
                defaults={
                    "name": entry["name"],
                    "type": entry["type"],
                    "lct_required_qty": entry["lct"],
                    "hwy_required_qty": entry["hwy"],
                    "width_mm": entry.get("width_mm"),
                    "height_mm": entry.get("height_mm"),
                    "reflectivity_astm_type": entry.get("reflectivity_astm_type", ""),
                },
            )

        for entry in SITES:
            Site.objects.get_or_create(name=entry["name"], defaults={"city": entry["city"], "province": entry["province"]})

        vehicles = []
        for entry in VEHICLES:
            vehicle, _ = Vehicle.objects.get_or_create(
                name=entry["name"],
                defaults={
                    "license_plate": entry["license_plate"],
                    "unit_number": entry["unit_number"],
                    "vehicle_class": entry["vehicle_class"],
                },
            )
            vehicles.append(vehicle)

        if not options["no_stock"]:
            for vehicle in vehicles:
                txns = stock_new_vehicle(vehicle=vehicle)
                self.stdout.write(f"{vehicle.name}: {len(txns)} item(s) loaded")

        self.stdout.write(self.style.SUCCESS("Catalog seed complete."))
