"""Admin router for catalog write endpoints."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .admin_views import InventoryItemAdminViewSet

router = SimpleRouter()
router.register(r"items", InventoryItemAdminViewSet, basename="admin-item")

urlpatterns = [path("", include(router.urls))]
