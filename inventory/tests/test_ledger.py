import pytest
from catalog.tests.factories import InventoryItemFactory, UserFactory
from common.choices import ItemStatus, TransactionType
from django.core.management import CommandError, call_command
from django.db import IntegrityError
from inventory import ledger
from inventory.exceptions import ImmutableRecordError, InsufficientStockError, NotFoundError, ValidationError
from inventory.models import StockLevel, Transaction
from inventory.selectors import history, project_stock
from inventory.services import EXTERNAL, submit_audit, transfer
from inventory.tests.factories import seed_stock
from locations.tests.factories import SiteFactory, VehicleFactory


@pytest.mark.django_db
def test_append_credits_destination_and_records_transaction():
    item = InventoryItemFactory()
    site = SiteFactory()
    user = UserFactory()

    txn = seed_stock(item, site, 12, submitted_by=user)

    assert txn.id is not None
    assert txn.sequence == txn.id
    assert txn.quantity == 12
    assert txn.transaction_type == TransactionType.AUDIT_ADJUSTMENT
    assert txn.source_location_id is None
    assert txn.dest_location_id == site.id
    assert txn.submitted_by_id == user.id
    assert project_stock(site.id) == {item.id: 12}


@pytest.mark.django_db
def test_append_debit_beyond_stock_raises_and_writes_nothing():
    item = InventoryItemFactory()
    site = SiteFactory()
    seed_stock(item, site, 3)

    with pytest.raises(InsufficientStockError) as exc:
        ledger.append(
            item_id=item.id,
            quantity=5,
            transaction_type=TransactionType.AUDIT_ADJUSTMENT,
            source_location_id=site.id,
            item_status=ItemStatus.MISSING,
        )

    assert exc.value.available == 3
    assert exc.value.requested == 5
    assert exc.value.as_payload()["available"] == 3
    assert Transaction.objects.count() == 1
    assert project_stock(site.id) == {item.id: 3}


@pytest.mark.django_db
@pytest.mark.parametrize("quantity", [0, -1, 1.5, "3", True])
def test_append_rejects_non_positive_or_non_integer_quantity(quantity):
    item = InventoryItemFactory()
    site = SiteFactory()

    with pytest.raises(ValidationError):
        ledger.append(
            item_id=item.id,
            quantity=quantity,
            transaction_type=TransactionType.AUDIT_ADJUSTMENT,
            dest_location_id=site.id,
        )
    assert Transaction.objects.count() == 0


@pytest.mark.django_db
def test_append_rejects_bad_entries():
    item = InventoryItemFactory()
    site = SiteFactory()
    vehicle = VehicleFactory()

    with pytest.raises(ValidationError):
        ledger.append(item_id=item.id, quantity=1, transaction_type=TransactionType.AUDIT_ADJUSTMENT)
    with pytest.raises(ValidationError):
        ledger.append(
            item_id=item.id,
            quantity=1,
            transaction_type=TransactionType.SITE_TO_VEHICLE,
            source_location_id=site.id,
            dest_location_id=site.id,
        )
    with pytest.raises(ValidationError):
        ledger.append(
            item_id=item.id,
            quantity=1,
            transaction_type="teleport",
            dest_location_id=site.id,
        )
    with pytest.raises(ValidationError):
        ledger.append(
            item_id=item.id,
            quantity=1,
            transaction_type=TransactionType.AUDIT_ADJUSTMENT,
            source_location_id=vehicle.id,
            dest_location_id=site.id,
        )
    assert Transaction.objects.count() == 0


@pytest.mark.django_db
def test_unknown_item_or_location_is_not_found():
    site = SiteFactory()
    item = InventoryItemFactory()

    with pytest.raises(NotFoundError):
        ledger.append(
            item_id=999999,
            quantity=1,
            transaction_type=TransactionType.AUDIT_ADJUSTMENT,
            dest_location_id=site.id,
        )
    with pytest.raises(NotFoundError):
        ledger.append(
            item_id=item.id,
            quantity=1,
            transaction_type=TransactionType.AUDIT_ADJUSTMENT,
            dest_location_id=999999,
        )
    with pytest.raises(NotFoundError):
        project_stock(999999)
    # Not-found is a kind of validation failure
    assert issubclass(NotFoundError, ValidationError)


@pytest.mark.django_db
def test_transactions_are_immutable():
    item = InventoryItemFactory()
    site = SiteFactory()
    txn = seed_stock(item, site, 4)

    txn.quantity = 40
    with pytest.raises(ImmutableRecordError):
        txn.save()
    with pytest.raises(ImmutableRecordError):
        txn.delete()

    txn.refresh_from_db()
    assert txn.quantity == 4
    assert Transaction.objects.count() == 1


@pytest.mark.django_db
def test_stock_level_check_constraint_rejects_negative_quantity():
    item = InventoryItemFactory()
    site = SiteFactory()
    with pytest.raises(IntegrityError):
        StockLevel.objects.create(item=item, location=site, quantity=-1)


@pytest.mark.django_db
def test_sequence_numbers_strictly_increase():
    item = InventoryItemFactory()
    site = SiteFactory()
    ids = [seed_stock(item, site, 1).id for _ in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


@pytest.mark.django_db
def test_history_is_newest_first_and_covers_both_sides():
    item = InventoryItemFactory()
    site = SiteFactory()
    vehicle = VehicleFactory()
    seed_stock(item, vehicle, 10)
    t1 = transfer(item_id=item.id, quantity=4, source_location_id=vehicle.id, dest_location_id=site.id)
    t2 = transfer(item_id=item.id, quantity=1, source_location_id=site.id, dest_location_id=vehicle.id)

    site_history = list(history(site.id))
    assert [t.id for t in site_history] == [t2.id, t1.id]
    assert len(list(history(vehicle.id))) == 3


@pytest.mark.django_db
def test_replay_matches_projection_after_mixed_operations():
    cones = InventoryItemFactory()
    drums = InventoryItemFactory()
    site = SiteFactory()
    truck = VehicleFactory()

    transfer(item_id=cones.id, quantity=20, source_location_id=EXTERNAL, dest_location_id=truck.id)
    transfer(item_id=drums.id, quantity=6, source_location_id=EXTERNAL, dest_location_id=truck.id)
    transfer(item_id=cones.id, quantity=12, source_location_id=truck.id, dest_location_id=site.id)
    submit_audit(location_id=truck.id, counts={cones.id: 7, drums.id: 9})
    transfer(item_id=cones.id, quantity=2, source_location_id=site.id, dest_location_id=truck.id)
    transfer(item_id=drums.id, quantity=9, source_location_id=truck.id, dest_location_id=EXTERNAL)

    for location in (site, truck):
        replayed = {item_id: qty for (item_id, _), qty in ledger.replay_stock(location.id).items()}
        assert replayed == project_stock(location.id)
    assert project_stock(truck.id) == {cones.id: 9}
    assert project_stock(site.id) == {cones.id: 10}
    assert ledger.find_projection_drift() == []


@pytest.mark.django_db
def test_rebuild_repairs_projection_drift():
    item = InventoryItemFactory()
    site = SiteFactory()
    seed_stock(item, site, 8)
    StockLevel.objects.filter(item=item, location=site).update(quantity=3)

    drift = ledger.find_projection_drift()
    assert drift == [{"item_id": item.id, "location_id": site.id, "expected": 8, "actual": 3}]

    assert ledger.rebuild_stock_levels() == 1
    assert project_stock(site.id) == {item.id: 8}
    assert ledger.find_projection_drift() == []


@pytest.mark.django_db
def test_rebuild_command_check_mode_fails_on_drift():
    item = InventoryItemFactory()
    site = SiteFactory()
    seed_stock(item, site, 5)

    call_command("rebuild_stock_levels", "--check")

    StockLevel.objects.filter(item=item, location=site).update(quantity=9)
    with pytest.raises(CommandError):
        call_command("rebuild_stock_levels", "--check")

    call_command("rebuild_stock_levels")
    call_command("rebuild_stock_levels", "--check")
    assert project_stock(site.id) == {item.id: 5}


@pytest.mark.django_db
def test_append_rejects_quantity_above_limit(settings):
    settings.INVENTORY_MAX_QUANTITY = 1000
    item = InventoryItemFactory()
    site = SiteFactory()

    with pytest.raises(ValidationError) as exc:
        ledger.append(
            item_id=item.id,
            quantity=1001,
            transaction_type=TransactionType.AUDIT_ADJUSTMENT,
            dest_location_id=site.id,
        )
    assert exc.value.as_payload()["max_quantity"] == 1000
    with pytest.raises(ValidationError):
        ledger.append(
            item_id=item.id,
            quantity=10**20,
            transaction_type=TransactionType.AUDIT_ADJUSTMENT,
            dest_location_id=site.id,
        )
    assert Transaction.objects.count() == 0


@pytest.mark.django_db
def test_append_rejects_credit_that_would_overflow_destination(settings):
    settings.INVENTORY_MAX_QUANTITY = 1000
    item = InventoryItemFactory()
    site = SiteFactory()
    vehicle = VehicleFactory()
    seed_stock(item, site, 600)
    seed_stock(item, vehicle, 600)

    with pytest.raises(ValidationError):
        transfer(item_id=item.id, quantity=600, source_location_id=vehicle.id, dest_location_id=site.id)

    assert Transaction.objects.count() == 2
    assert project_stock(site.id) == {item.id: 600}
    assert project_stock(vehicle.id) == {item.id: 600}
