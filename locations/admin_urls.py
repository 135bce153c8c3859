"""Admin router for site and vehicle write endpoints."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .admin_views import SiteAdminViewSet, VehicleAdminViewSet

router = SimpleRouter()
router.register(r"sites", SiteAdminViewSet, basename="admin-site")
router.register(r"vehicles", VehicleAdminViewSet, basename="admin-vehicle")

urlpatterns = [path("", include(router.urls))]
