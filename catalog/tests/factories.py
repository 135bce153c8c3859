import factory
from catalog.models import InventoryItem
from common.choices import ItemType
from django.contrib.auth import get_user_model
from factory import Faker
from factory.django import DjangoModelFactory


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()

    username = factory.Sequence(lambda n: f"worker{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    first_name = Faker("first_name")
    last_name = Faker("last_name")
    password = factory.PostGenerationMethodCall("set_password", "pass")


class StaffUserFactory(UserFactory):
    username = factory.Sequence(lambda n: f"supervisor{n}")
    is_staff = True


class InventoryItemFactory(DjangoModelFactory):
    class Meta:
        model = InventoryItem

    name = factory.Sequence(lambda n: f"Cone {n}")
    sku = factory.Sequence(lambda n: f"ITEM-{n:04d}")
    description = Faker("sentence")
    type = ItemType.CONE
    lct_required_qty = 0
    hwy_required_qty = 0
    billable = True
    status = InventoryItem.STATUS_ACTIVE
