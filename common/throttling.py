"""Scoped throttling shared by all apps.

Rates are looked up in ``settings.REST_FRAMEWORK`` on every request rather
than once at import, so ``override_settings`` in tests takes effect. A scope
with no configured rate is not throttled.
"""

from django.conf import settings
from rest_framework.throttling import ScopedRateThrottle


class SettingsScopedRateThrottle(ScopedRateThrottle):
    def get_rate(self):
        rates = getattr(settings, "REST_FRAMEWORK", {}).get("DEFAULT_THROTTLE_RATES", {})
        return rates.get(self.scope)
