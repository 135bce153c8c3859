from django.urls import path

from .views import (
    SiteAuditView,
    SiteHistoryView,
    SiteInventoryView,
    SiteReportStatusView,
    TransferView,
    VehicleAuditView,
    VehicleDropOffView,
    VehicleHistoryView,
    VehicleInventoryItemView,
    VehicleInventoryView,
    VehicleReportStatusView,
)

urlpatterns = [
    # Sites
    path("sites/<int:pk>/inventory/", SiteInventoryView.as_view(), name="site-inventory"),
    path("sites/<int:pk>/inventory/history/", SiteHistoryView.as_view(), name="site-inventory-history"),
    path("sites/<int:pk>/inventory/audit/", SiteAuditView.as_view(), name="site-inventory-audit"),
    path(
        "sites/<int:pk>/inventory/<int:inventory_id>/report-status/",
        SiteReportStatusView.as_view(),
        name="site-inventory-report-status",
    ),
    # Vehicles
    path("vehicles/<int:pk>/inventory/", VehicleInventoryView.as_view(), name="vehicle-inventory"),
    path("vehicles/<int:pk>/inventory/history/", VehicleHistoryView.as_view(), name="vehicle-inventory-history"),
    path("vehicles/<int:pk>/inventory/audit/", VehicleAuditView.as_view(), name="vehicle-inventory-audit"),
    path("vehicles/<int:pk>/inventory/drop-off/", VehicleDropOffView.as_view(), name="vehicle-inventory-drop-off"),
    path(
        "vehicles/<int:pk>/inventory/<int:inventory_id>/",
        VehicleInventoryItemView.as_view(),
        name="vehicle-inventory-item",
    ),
    path(
        "vehicles/<int:pk>/inventory/<int:inventory_id>/report-status/",
        VehicleReportStatusView.as_view(),
        name="vehicle-inventory-report-status",
    ),
    # Generic transfer
    path("inventory/transfers/", TransferView.as_view(), name="inventory-transfer"),
]

# EOF
