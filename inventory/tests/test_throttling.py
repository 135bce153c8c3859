import pytest
from catalog.tests.factories import InventoryItemFactory, UserFactory
from django.core.cache import cache
from locations.tests.factories import SiteFactory, VehicleFactory
from rest_framework.test import APIClient


def _rates(settings, **overrides):
    rates = dict(settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"])
    rates.update(overrides)
    settings.REST_FRAMEWORK = {**settings.REST_FRAMEWORK, "DEFAULT_THROTTLE_RATES": rates}


@pytest.fixture
def client():
    cache.clear()
    c = APIClient()
    c.force_authenticate(user=UserFactory())
    return c


@pytest.mark.django_db
def test_inventory_read_scope_throttling_hits_limit_quickly(client, settings):
    _rates(settings, inventory="1/min")
    site = SiteFactory()

    r1 = client.get(f"/api/v1/sites/{site.id}/inventory/")
    assert r1.status_code == 200
    r2 = client.get(f"/api/v1/sites/{site.id}/inventory/")
    # Second call should be throttled under scope rate
    assert r2.status_code == 429


@pytest.mark.django_db
def test_vehicle_writes_use_the_write_scope(client, settings):
    _rates(settings, inventory="100/min", inventory_write="1/min")
    vehicle = VehicleFactory()
    item = InventoryItemFactory()
    url = f"/api/v1/vehicles/{vehicle.id}/inventory/"
    body = {"items": [{"inventoryId": item.id, "quantity": 1}], "source": "office"}

    assert client.post(url, body, format="json").status_code == 201
    assert client.post(url, body, format="json").status_code == 429
    # Reads are counted separately
    assert client.get(url).status_code == 200
