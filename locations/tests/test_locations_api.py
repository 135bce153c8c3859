import pytest
from catalog.tests.factories import InventoryItemFactory, StaffUserFactory, UserFactory
from inventory.models import Transaction
from inventory.selectors import project_stock
from inventory.services import submit_audit
from inventory.tests.factories import seed_stock
from locations.models import Location, Site, Vehicle
from locations.tests.factories import SiteFactory, VehicleFactory
from rest_framework.test import APIClient


@pytest.fixture
def client():
    c = APIClient()
    c.force_authenticate(user=UserFactory())
    return c


@pytest.fixture
def admin_client():
    c = APIClient()
    c.force_authenticate(user=StaffUserFactory())
    return c


@pytest.mark.django_db
def test_location_kind_is_set_by_subclass():
    site = SiteFactory()
    vehicle = VehicleFactory()

    assert Location.objects.get(id=site.id).kind == "site"
    assert Location.objects.get(id=vehicle.id).kind == "vehicle"
    assert site.is_site and not site.is_vehicle


@pytest.mark.django_db
def test_list_and_filter_sites(client):
    SiteFactory(name="Main St closure", city="Kingston")
    SiteFactory(name="Bridge deck", city="Ottawa", is_active=False)

    resp = client.get("/api/v1/sites/")
    active = client.get("/api/v1/sites/", {"is_active": "true"})
    search = client.get("/api/v1/sites/", {"search": "bridge"})

    assert resp.status_code == 200
    assert resp.data["count"] == 2
    assert resp.data["results"][0]["kind"] == "site"
    assert [r["name"] for r in active.data["results"]] == ["Main St closure"]
    assert [r["name"] for r in search.data["results"]] == ["Bridge deck"]


@pytest.mark.django_db
def test_vehicle_detail_with_driver(client):
    driver = UserFactory(first_name="Sam", last_name="Ortiz")
    vehicle = VehicleFactory(driver=driver, vehicle_class=Vehicle.CLASS_LCT)
    VehicleFactory()

    detail = client.get(f"/api/v1/vehicles/{vehicle.id}/")
    lct = client.get("/api/v1/vehicles/", {"vehicle_class": "lct"})

    assert detail.status_code == 200
    assert detail.data["driver"] == driver.id
    assert detail.data["driver_name"] == "Sam Ortiz"
    assert [r["id"] for r in lct.data["results"]] == [vehicle.id]


@pytest.mark.django_db
def test_locations_require_authentication():
    assert APIClient().get("/api/v1/vehicles/").status_code in (401, 403)


@pytest.mark.django_db
def test_admin_creates_site(admin_client):
    resp = admin_client.post(
        "/api/v1/admin/locations/sites/",
        {"name": "Hwy 401 km 615", "city": "Kingston", "province": "ON"},
        format="json",
    )

    assert resp.status_code == 201
    assert resp.data["kind"] == "site"
    assert Site.objects.filter(name="Hwy 401 km 615").exists()


@pytest.mark.django_db
def test_admin_location_writes_require_staff(client):
    resp = client.post("/api/v1/admin/locations/sites/", {"name": "Nope"}, format="json")
    assert resp.status_code == 403


@pytest.mark.django_db
def test_admin_create_vehicle_with_auto_stock(admin_client):
    cones = InventoryItemFactory(lct_required_qty=20, hwy_required_qty=10)
    signs = InventoryItemFactory(lct_required_qty=4, hwy_required_qty=0)

    resp = admin_client.post(
        "/api/v1/admin/locations/vehicles/",
        {"name": "Truck 12", "license_plate": "ABCD 123", "vehicle_class": "lct", "auto_stock": True},
        format="json",
    )

    assert resp.status_code == 201
    assert "auto_stock" not in resp.data
    assert project_stock(resp.data["id"]) == {cones.id: 20, signs.id: 4}
    assert Transaction.objects.filter(dest_location_id=resp.data["id"], source_location__isnull=True).count() == 2


@pytest.mark.django_db
def test_admin_create_vehicle_without_auto_stock(admin_client):
    InventoryItemFactory(hwy_required_qty=10)

    resp = admin_client.post(
        "/api/v1/admin/locations/vehicles/",
        {"name": "Truck 13", "license_plate": "ABCD 124"},
        format="json",
    )

    assert resp.status_code == 201
    assert resp.data["vehicle_class"] == "hwy"
    assert project_stock(resp.data["id"]) == {}


@pytest.mark.django_db
def test_delete_location_with_history_is_409(admin_client):
    site = SiteFactory()
    seed_stock(InventoryItemFactory(), site, 2)

    resp = admin_client.delete(f"/api/v1/admin/locations/sites/{site.id}/")

    assert resp.status_code == 409
    assert Site.objects.filter(id=site.id).exists()


@pytest.mark.django_db
def test_delete_unused_vehicle(admin_client):
    vehicle = VehicleFactory()
    submit_audit(location_id=vehicle.id, counts={InventoryItemFactory().id: 0})

    resp = admin_client.delete(f"/api/v1/admin/locations/vehicles/{vehicle.id}/")

    assert resp.status_code == 204
    assert not Location.objects.filter(id=vehicle.id).exists()
