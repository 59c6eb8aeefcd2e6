from rest_framework.throttling import SimpleRateThrottle
from django.core.cache import cache
from authentication.core.ip_utils import get_client_ip
import logging

logger = logging.getLogger(__name__)


class IPBasedThrottle(SimpleRateThrottle):
    """
    Per-IP throttle for unauthenticated write endpoints (analytics beacons,
    inquiry forms). An IP that keeps hammering after being throttled is
    blocked for a day.
    """
    scope = 'tracking'
    block_after = 50

    def get_cache_key(self, request, view):
        ip = get_client_ip(request.META)
        if not ip:
            return None
        return self.cache_format % {'scope': self.scope, 'ident': ip}

    def allow_request(self, request, view):
        ip = get_client_ip(request.META)
        if ip and cache.get(f"ip_blocked:{ip}"):
            logger.warning(f"Rejected request from blocked IP: {ip}")
            return False

        allowed = super().allow_request(request, view)
        if not allowed and ip:
            key = f"throttled_hits:{self.scope}:{ip}"
            hits = cache.get(key, 0) + 1
            cache.set(key, hits, timeout=3600)
            if hits >= self.block_after:
                cache.set(f"ip_blocked:{ip}", True, timeout=86400)
                logger.error(f"IP {ip} blocked after {hits} throttled requests on {self.scope}")
        return allowed


class InquiryThrottle(IPBasedThrottle):
    scope = 'inquiry'
    rate = '20/hour'
