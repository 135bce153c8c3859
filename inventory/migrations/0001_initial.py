import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("locations", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StockLevel",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.IntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_levels",
                        to="catalog.inventoryitem",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_levels",
                        to="locations.location",
                    ),
                ),
            ],
            options={
                "ordering": ["location_id", "item_id"],
                "indexes": [models.Index(fields=["location", "item"], name="stocklevel_location_item_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("item", "location"), name="unique_stock_level_per_pair"),
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 0)), name="stock_level_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[
                            ("vehicle_to_site", "Dropped Off"),
                            ("site_to_vehicle", "Picked Up"),
                            ("audit_adjustment", "Audit Adjustment"),
                        ],
                        db_index=True,
                        max_length=32,
                    ),
                ),
                ("job_id", models.CharField(blank=True, default="", max_length=64)),
                (
                    "item_status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("damaged", "Damaged"),
                            ("missing", "Missing"),
                            ("stolen", "Stolen"),
                            ("disposed", "Disposed"),
                        ],
                        db_index=True,
                        default="active",
                        max_length=16,
                    ),
                ),
                ("is_audit", models.BooleanField(default=False)),
                ("notes", models.CharField(blank=True, max_length=255)),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False),
                ),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="catalog.inventoryitem",
                    ),
                ),
                (
                    "source_location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="outbound_transactions",
                        to="locations.location",
                    ),
                ),
                (
                    "dest_location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inbound_transactions",
                        to="locations.location",
                    ),
                ),
                (
                    "submitted_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inventory_transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["item", "created_at"], name="txn_item_created_idx"),
                    models.Index(fields=["source_location", "created_at"], name="txn_source_created_idx"),
                    models.Index(fields=["dest_location", "created_at"], name="txn_dest_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity__gt", 0)), name="transaction_positive_qty"),
                    models.CheckConstraint(
                        condition=models.Q(("source_location", models.F("dest_location")), _negated=True),
                        name="transaction_source_ne_dest",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("source_location__isnull", False), ("dest_location__isnull", False), _connector="OR"
                        ),
                        name="transaction_has_location",
                    ),
                ],
            },
        ),
    ]
