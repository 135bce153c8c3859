"""JWT token endpoints with scoped throttling and auth event logging."""

import logging

from common.throttling import SettingsScopedRateThrottle
from drf_spectacular.utils import extend_schema
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

logger = logging.getLogger("fieldstock.auth")


def log_auth_event(action: str, request, status: str = "success", username: str | None = None):
    """Emit a structured auth event with action, client ip and outcome."""
    logger.info(
        f"auth.{action}",
        extra={
            "event": f"auth.{action}",
            "ip": request.META.get("REMOTE_ADDR"),
            "status": status,
            "username": username,
        },
    )


class ThrottledTokenObtainPairView(TokenObtainPairView):
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "token"

    @extend_schema(tags=["Auth Endpoints"], summary="Obtain access and refresh tokens")
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        log_auth_event("token_obtain", request, username=request.data.get("username"))
        return resp


class ThrottledTokenRefreshView(TokenRefreshView):
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "token_refresh"

    @extend_schema(tags=["Auth Endpoints"], summary="Refresh an access token")
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        log_auth_event("token_refresh", request)
        return resp
