"""URL routes for the locations app."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import SiteViewSet, VehicleViewSet

router = SimpleRouter()
router.register(r"sites", SiteViewSet, basename="site")
router.register(r"vehicles", VehicleViewSet, basename="vehicle")

urlpatterns = [path("", include(router.urls))]
