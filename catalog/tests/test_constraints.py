import pytest
from catalog.tests.factories import InventoryItemFactory
from django.db import IntegrityError, transaction


@pytest.mark.django_db
def test_unique_non_blank_sku():
    InventoryItemFactory(sku="SGN-STOP")
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            InventoryItemFactory(sku="SGN-STOP")


@pytest.mark.django_db
def test_blank_skus_may_repeat():
    InventoryItemFactory(sku="")
    InventoryItemFactory(sku="")
