import pytest
from catalog.models import InventoryItem
from catalog.tests.factories import InventoryItemFactory, StaffUserFactory, UserFactory
from inventory.models import StockLevel
from inventory.services import submit_audit
from inventory.tests.factories import seed_stock
from locations.tests.factories import SiteFactory
from rest_framework.test import APIClient


@pytest.fixture
def admin_client():
    c = APIClient()
    c.force_authenticate(user=StaffUserFactory())
    return c


@pytest.mark.django_db
def test_admin_endpoints_require_staff():
    c = APIClient()
    c.force_authenticate(user=UserFactory())
    resp = c.post("/api/v1/admin/catalog/items/", {"name": "Cone"}, format="json")
    assert resp.status_code == 403
    assert APIClient().get("/api/v1/admin/catalog/items/").status_code in (401, 403)


@pytest.mark.django_db
def test_admin_can_create_and_update_item(admin_client):
    create = admin_client.post(
        "/api/v1/admin/catalog/items/",
        {"name": "Cone 28in", "sku": " CONE-28 ", "type": "cone", "lct_required_qty": 30, "hwy_required_qty": 12},
        format="json",
    )
    assert create.status_code == 201
    assert create.data["sku"] == "CONE-28"

    update = admin_client.patch(
        f"/api/v1/admin/catalog/items/{create.data['id']}/", {"name": "Cone 28in reflective", "type": "drum"}, format="json"
    )
    assert update.status_code == 200
    item = InventoryItem.objects.get(id=create.data["id"])
    assert item.name == "Cone 28in reflective"
    assert item.type == "drum"


@pytest.mark.django_db
def test_admin_sku_must_be_unique_unless_blank(admin_client):
    InventoryItemFactory(sku="SGN-STOP")
    InventoryItemFactory(sku="")

    dup = admin_client.post("/api/v1/admin/catalog/items/", {"name": "Stop", "sku": "SGN-STOP"}, format="json")
    blank = admin_client.post("/api/v1/admin/catalog/items/", {"name": "Misc", "sku": ""}, format="json")

    assert dup.status_code == 400
    assert "sku" in dup.data
    assert blank.status_code == 201


@pytest.mark.django_db
def test_locked_fields_once_item_has_history(admin_client):
    item = InventoryItemFactory(sku="CONE-18")
    seed_stock(item, SiteFactory(), 3)
    url = f"/api/v1/admin/catalog/items/{item.id}/"

    sku_change = admin_client.patch(url, {"sku": "CONE-19"}, format="json")
    same_sku = admin_client.patch(url, {"sku": "CONE-18", "name": "Cone 18in"}, format="json")
    retire = admin_client.patch(url, {"status": "retired"}, format="json")

    assert sku_change.status_code == 400
    assert "sku" in sku_change.data
    assert same_sku.status_code == 200
    assert retire.status_code == 200
    item.refresh_from_db()
    assert item.sku == "CONE-18"
    assert item.status == InventoryItem.STATUS_RETIRED


@pytest.mark.django_db
def test_delete_item_with_history_is_409(admin_client):
    item = InventoryItemFactory()
    seed_stock(item, SiteFactory(), 1)

    resp = admin_client.delete(f"/api/v1/admin/catalog/items/{item.id}/")

    assert resp.status_code == 409
    assert resp.data["code"] == "protected"
    assert InventoryItem.objects.filter(id=item.id).exists()


@pytest.mark.django_db
def test_delete_unused_item(admin_client):
    item = InventoryItemFactory()
    # A zero count leaves an empty projection row and no transaction
    submit_audit(location_id=SiteFactory().id, counts={item.id: 0})
    assert StockLevel.objects.filter(item=item).exists()

    resp = admin_client.delete(f"/api/v1/admin/catalog/items/{item.id}/")

    assert resp.status_code == 204
    assert not InventoryItem.objects.filter(id=item.id).exists()
