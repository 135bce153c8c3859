"""DRF views for site and vehicle inventory, audits and transfers."""

from common.throttling import SettingsScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import grouping, selectors, services
from .exceptions import (
    ConcurrencyConflictError,
    ImmutableRecordError,
    InsufficientStockError,
    LedgerError,
    NotFoundError,
)
from .filters import TransactionFilter
from .serializers import (
    AuditSubmitSerializer,
    DropOffSerializer,
    HistoryGroupSerializer,
    ReportStatusSerializer,
    StockLevelSerializer,
    TransactionSerializer,
    TransferSerializer,
    VehicleInventoryWriteSerializer,
    VehicleStockSerializer,
)

ErrorResponse = inline_serializer(
    name="LedgerErrorResponse",
    fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
)
InsufficientStockResponse = inline_serializer(
    name="InsufficientStockResponse",
    fields={
        "detail": rf_serializers.CharField(),
        "code": rf_serializers.CharField(),
        "item_id": rf_serializers.IntegerField(),
        "location_id": rf_serializers.IntegerField(),
        "requested": rf_serializers.IntegerField(),
        "available": rf_serializers.IntegerField(),
    },
)


def ledger_error_response(exc: LedgerError) -> Response:
    """Translate a ledger error into a structured response."""

    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (InsufficientStockError, ImmutableRecordError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, ConcurrencyConflictError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response(exc.as_payload(), status=code)


def _is_truthy(value) -> bool:
    return str(value or "").lower() in {"1", "true", "yes", "on"}


class HistoryPagination(LimitOffsetPagination):
    default_limit = 50
    max_limit = 10000


HISTORY_PARAMETERS = [
    OpenApiParameter(name="limit", description="Page size (default 50)", required=False, type=int),
    OpenApiParameter(name="offset", description="Rows or groups to skip", required=False, type=int),
    OpenApiParameter(name="transaction_type", description="vehicle_to_site, site_to_vehicle or audit_adjustment", required=False, type=str),
    OpenApiParameter(name="item_status", description="active, damaged, missing, stolen or disposed", required=False, type=str),
    OpenApiParameter(name="created_after", description="Created at >= value (ISO)", required=False, type=str),
    OpenApiParameter(name="created_before", description="Created at <= value (ISO)", required=False, type=str),
    OpenApiParameter(name="grouped", description="Collapse simultaneous transactions into events", required=False, type=bool),
]


class _LedgerAPIView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "inventory"

    def handle_exception(self, exc):
        if isinstance(exc, LedgerError):
            return ledger_error_response(exc)
        return super().handle_exception(exc)


class _HistoryView(_LedgerAPIView):
    """Paginated ledger history for one location, raw or grouped."""

    split_by_counterpart = False

    def get_location(self, pk):
        raise NotImplementedError

    def get(self, request, pk):
        location = self.get_location(pk)
        grouped = _is_truthy(request.query_params.get("grouped"))
        params = request.query_params.copy()
        item_status = params.pop("item_status", [None])[-1] if grouped else None

        filterset = TransactionFilter(params, queryset=selectors.history(location.id))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        if item_status and not TransactionFilter({"item_status": item_status}).is_valid():
            return Response({"item_status": ["Select a valid choice."]}, status=status.HTTP_400_BAD_REQUEST)

        paginator = HistoryPagination()
        if not grouped:
            page = paginator.paginate_queryset(filterset.qs, request, view=self)
            data = TransactionSerializer(page, many=True).data
            return paginator.get_paginated_response(data)

        groups = grouping.group_transactions(
            filterset.qs,
            split_by_counterpart_of=location.id if self.split_by_counterpart else None,
        )
        groups = grouping.filter_groups(groups, item_status=item_status)
        paginator.request = request
        paginator.limit = paginator.get_limit(request)
        paginator.offset = paginator.get_offset(request)
        paginator.count, page = grouping.paginate_groups(groups, limit=paginator.limit, offset=paginator.offset)
        # Same envelope and links as the raw feed
        return paginator.get_paginated_response(HistoryGroupSerializer(page, many=True).data)


class _ReportStatusView(_LedgerAPIView):
    throttle_scope = "inventory_write"

    def get_location(self, pk):
        raise NotImplementedError

    def post(self, request, pk, inventory_id):
        location = self.get_location(pk)
        serializer = ReportStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        txn = services.report_item_status(
            location_id=location.id,
            item_id=inventory_id,
            status=serializer.validated_data["status"],
            quantity=serializer.validated_data["quantity"],
            submitted_by=request.user,
            notes=serializer.validated_data.get("notes", ""),
        )
        return Response(TransactionSerializer(txn).data, status=status.HTTP_201_CREATED)


class _AuditView(_LedgerAPIView):
    throttle_scope = "inventory_write"

    def get_location(self, pk):
        raise NotImplementedError

    def post(self, request, pk):
        location = self.get_location(pk)
        serializer = AuditSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        txns = services.submit_audit(
            location_id=location.id,
            counts=serializer.counts(),
            submitted_by=request.user,
            is_audit=serializer.validated_data["isAudit"],
            item_status=serializer.validated_data["itemStatus"],
            notes=serializer.validated_data.get("notes", ""),
        )
        return Response(
            {"adjustments": TransactionSerializer(txns, many=True).data},
            status=status.HTTP_201_CREATED,
        )


# Sites


class SiteInventoryView(_LedgerAPIView):
    @extend_schema(
        tags=["Site Inventory"],
        summary="Current stock at a site",
        responses={200: StockLevelSerializer(many=True), 404: ErrorResponse},
        examples=[
            OpenApiExample(
                "Site stock",
                value=[
                    {
                        "inventory_id": 3,
                        "name": "Cone 18in",
                        "sku": "CONE-18",
                        "type": "cone",
                        "item_status": "active",
                        "quantity": 12,
                        "updated_at": "2025-01-01T12:00:00Z",
                    }
                ],
                response_only=True,
            )
        ],
    )
    def get(self, request, pk):
        site = selectors.get_site(pk)
        rows = selectors.list_stock_at_location(site.id)
        return Response(StockLevelSerializer(rows, many=True).data)


class SiteHistoryView(_HistoryView):
    def get_location(self, pk):
        return selectors.get_site(pk)

    @extend_schema(
        tags=["Site Inventory"],
        summary="Site inventory history",
        description="Transactions touching the site, newest first. With grouped=true, simultaneous transactions by one submitter are returned as one event.",
        parameters=HISTORY_PARAMETERS,
        responses={200: TransactionSerializer(many=True), 404: ErrorResponse},
    )
    def get(self, request, pk):
        return super().get(request, pk)


class SiteAuditView(_AuditView):
    def get_location(self, pk):
        return selectors.get_site(pk)

    @extend_schema(
        tags=["Site Inventory"],
        summary="Submit a site audit",
        request=AuditSubmitSerializer,
        responses={201: TransactionSerializer(many=True), 400: ErrorResponse, 404: ErrorResponse, 503: ErrorResponse},
    )
    def post(self, request, pk):
        return super().post(request, pk)


class SiteReportStatusView(_ReportStatusView):
    def get_location(self, pk):
        return selectors.get_site(pk)

    @extend_schema(
        tags=["Site Inventory"],
        summary="Report items missing or damaged at a site",
        request=ReportStatusSerializer,
        responses={201: TransactionSerializer, 404: ErrorResponse, 409: InsufficientStockResponse},
    )
    def post(self, request, pk, inventory_id):
        return super().post(request, pk, inventory_id)


# Vehicles


class VehicleInventoryView(_LedgerAPIView):
    def get_throttles(self):
        self.throttle_scope = "inventory" if self.request.method == "GET" else "inventory_write"
        return super().get_throttles()

    @extend_schema(
        tags=["Vehicle Inventory"],
        summary="Current stock on a vehicle",
        description="On-board quantities with the vehicle class target and a stock status per item.",
        responses={200: VehicleStockSerializer(many=True), 404: ErrorResponse},
        examples=[
            OpenApiExample(
                "Vehicle stock",
                value=[
                    {
                        "inventory_id": 3,
                        "name": "Cone 18in",
                        "sku": "CONE-18",
                        "type": "cone",
                        "quantity": 8,
                        "required_quantity": 20,
                        "stock_status": "low_stock",
                    }
                ],
                response_only=True,
            )
        ],
    )
    def get(self, request, pk):
        vehicle = selectors.get_vehicle(pk)
        return Response(VehicleStockSerializer(selectors.list_vehicle_inventory(vehicle), many=True).data)

    @extend_schema(
        tags=["Vehicle Inventory"],
        summary="Add or set items on a vehicle",
        description=(
            "With `source` (office or site) the quantities are loaded onto the vehicle.\n"
            "Without it each quantity is the new on-board target; the difference is "
            "pulled from or returned to the office pool."
        ),
        request=VehicleInventoryWriteSerializer,
        responses={201: TransactionSerializer(many=True), 400: ErrorResponse, 404: ErrorResponse, 409: InsufficientStockResponse},
        examples=[
            OpenApiExample(
                "Load from site",
                value={"items": [{"inventoryId": 3, "quantity": 4}], "source": "site", "sourceSiteId": 7, "jobId": "J-1042"},
                request_only=True,
            )
        ],
    )
    def post(self, request, pk):
        vehicle = selectors.get_vehicle(pk)
        serializer = VehicleInventoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        lines = [(line["inventoryId"], line["quantity"]) for line in data["items"]]
        job_id = data.get("jobId", "")
        if data.get("source"):
            txns = services.add_to_vehicle(
                vehicle_id=vehicle.id,
                items=lines,
                source_site_id=data.get("sourceSiteId") if data["source"] == serializer.SOURCE_SITE else None,
                submitted_by=request.user,
                job_id=job_id,
            )
        else:
            txns = services.set_vehicle_quantities(
                vehicle_id=vehicle.id,
                targets=dict(lines),
                submitted_by=request.user,
                job_id=job_id,
            )
        return Response(TransactionSerializer(txns, many=True).data, status=status.HTTP_201_CREATED)


class VehicleInventoryItemView(_LedgerAPIView):
    throttle_scope = "inventory_write"

    @extend_schema(
        tags=["Vehicle Inventory"],
        summary="Remove an item from a vehicle",
        description="Returns the whole on-board quantity of the item to the office pool.",
        responses={204: None, 404: ErrorResponse},
    )
    def delete(self, request, pk, inventory_id):
        vehicle = selectors.get_vehicle(pk)
        services.remove_vehicle_item(vehicle_id=vehicle.id, item_id=inventory_id, submitted_by=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class VehicleHistoryView(_HistoryView):
    split_by_counterpart = True

    def get_location(self, pk):
        return selectors.get_vehicle(pk)

    @extend_schema(
        tags=["Vehicle Inventory"],
        summary="Vehicle inventory history",
        description="Transactions touching the vehicle, newest first. Grouped events are also split by the site on the other side.",
        parameters=HISTORY_PARAMETERS,
        responses={200: TransactionSerializer(many=True), 404: ErrorResponse},
    )
    def get(self, request, pk):
        return super().get(request, pk)


class VehicleAuditView(_AuditView):
    def get_location(self, pk):
        return selectors.get_vehicle(pk)

    @extend_schema(
        tags=["Vehicle Inventory"],
        summary="Submit a vehicle audit",
        description="Reconciles the vehicle's stock with a physical count. Items already at their counted quantity are left alone.",
        request=AuditSubmitSerializer,
        responses={201: TransactionSerializer(many=True), 400: ErrorResponse, 404: ErrorResponse, 503: ErrorResponse},
        examples=[
            OpenApiExample(
                "Audit",
                value={"items": [{"inventoryId": 5, "qty": 7}], "isAudit": True},
                request_only=True,
            )
        ],
    )
    def post(self, request, pk):
        return super().post(request, pk)


class VehicleDropOffView(_LedgerAPIView):
    throttle_scope = "inventory_write"

    @extend_schema(
        tags=["Vehicle Inventory"],
        summary="Drop items off a vehicle",
        request=DropOffSerializer,
        responses={201: TransactionSerializer(many=True), 400: ErrorResponse, 404: ErrorResponse, 409: InsufficientStockResponse},
        examples=[
            OpenApiExample(
                "Drop at site",
                value={"items": [{"inventoryId": 3, "quantity": 12}], "destination": "site", "destinationSiteId": 7},
                request_only=True,
            )
        ],
    )
    def post(self, request, pk):
        vehicle = selectors.get_vehicle(pk)
        serializer = DropOffSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        txns = services.drop_off(
            vehicle_id=vehicle.id,
            items=[(line["inventoryId"], line["quantity"]) for line in data["items"]],
            destination_site_id=data.get("destinationSiteId") if data["destination"] == serializer.DEST_SITE else None,
            submitted_by=request.user,
            job_id=data.get("jobId", ""),
        )
        return Response(TransactionSerializer(txns, many=True).data, status=status.HTTP_201_CREATED)


class VehicleReportStatusView(_ReportStatusView):
    def get_location(self, pk):
        return selectors.get_vehicle(pk)

    @extend_schema(
        tags=["Vehicle Inventory"],
        summary="Report items missing or damaged on a vehicle",
        request=ReportStatusSerializer,
        responses={201: TransactionSerializer, 404: ErrorResponse, 409: InsufficientStockResponse},
    )
    def post(self, request, pk, inventory_id):
        return super().post(request, pk, inventory_id)


class TransferView(_LedgerAPIView):
    throttle_scope = "inventory_write"

    @extend_schema(
        tags=["Inventory Transfers"],
        summary="Transfer one item",
        description="Moves stock between a site and a vehicle. A null location id addresses the office pool.",
        request=TransferSerializer,
        responses={201: TransactionSerializer, 400: ErrorResponse, 404: ErrorResponse, 409: InsufficientStockResponse, 503: ErrorResponse},
        examples=[
            OpenApiExample(
                "Vehicle to site",
                value={"inventoryId": 3, "quantity": 12, "sourceLocationId": 11, "destLocationId": 7},
                request_only=True,
            ),
            OpenApiExample(
                "Insufficient stock",
                value={"detail": "Only 3 available", "code": "insufficient_stock", "item_id": 4, "location_id": 11, "requested": 5, "available": 3},
                response_only=True,
                status_codes=["409"],
            ),
        ],
    )
    def post(self, request):
        serializer = TransferSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        def endpoint(value):
            return services.EXTERNAL if value is None else value

        txn = services.transfer(
            item_id=data["inventoryId"],
            quantity=data["quantity"],
            source_location_id=endpoint(data["sourceLocationId"]),
            dest_location_id=endpoint(data["destLocationId"]),
            submitted_by=request.user,
            job_id=data.get("jobId", ""),
            item_status=data["itemStatus"],
            notes=data.get("notes", ""),
        )
        return Response(TransactionSerializer(txn).data, status=status.HTTP_201_CREATED)


# EOF
