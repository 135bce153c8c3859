"""URL routes for the catalog app."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import InventoryItemViewSet

router = SimpleRouter()
router.register(r"items", InventoryItemViewSet, basename="item")

urlpatterns = [path("", include(router.urls))]
