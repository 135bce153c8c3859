import factory
from factory import Faker
from factory.django import DjangoModelFactory
from locations.models import Site, Vehicle


class SiteFactory(DjangoModelFactory):
    class Meta:
        model = Site

    name = factory.Sequence(lambda n: f"Site {n}")
    street = Faker("street_address")
    city = Faker("city")
    province = "ON"
    postal_code = "K7L 3N6"


class VehicleFactory(DjangoModelFactory):
    class Meta:
        model = Vehicle

    name = factory.Sequence(lambda n: f"Truck {n}")
    license_plate = factory.Sequence(lambda n: f"TRK {n:04d}")
    unit_number = factory.Sequence(lambda n: str(n))
    vehicle_class = Vehicle.CLASS_HWY
