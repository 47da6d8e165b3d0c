"""
Request throttling for the credential and billing endpoints.

Every route gets the default bucket through ``SlowAPIMiddleware``; routes
decorated with ``limiter.limit(get_rate_limit(...))`` use a named bucket
instead:

- login (reader, writer, admin, subscriber lookup): 5 per minute
- signup (reader, admin, trial registration): 3 per minute
- billing (gateway charge/renew/cancel/status): 30 per minute
- default: 100 per minute

Buckets are keyed per client IP. Counters live in Redis when ``REDIS_URL``
is set so that all workers share them.
"""

import ipaddress
import logging
from typing import Optional

from starlette.requests import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

# Checked in order; the first public address wins
FORWARDING_HEADERS = ("x-forwarded-for", "x-real-ip")

RATE_LIMITS = {
    "login": "5/minute",
    "signup": "3/minute",
    "billing": "30/minute",
    "default": "100/minute",
}


def _public_ip(value: str) -> Optional[str]:
    """Parse *value* as an IP address; private and loopback addresses are ignored."""
    try:
        addr = ipaddress.ip_address(value.strip())
    except ValueError:
        return None
    if addr.is_private or addr.is_loopback or addr.is_link_local:
        return None
    return str(addr)


def client_ip(request: Request) -> str:
    for header in FORWARDING_HEADERS:
        raw = request.headers.get(header)
        if not raw:
            continue
        # X-Forwarded-For lists the originating client first
        ip = _public_ip(raw.split(",")[0])
        if ip:
            return ip
    return get_remote_address(request)


def _storage_uri() -> str:
    if settings.redis_url:
        return settings.redis_url
    if settings.is_production:
        logger.critical("No REDIS_URL in production; rate limits will not be shared across workers")
    else:
        logger.warning("Rate limiter using in-memory storage")
    return "memory://"


limiter = Limiter(
    key_func=client_ip,
    storage_uri=_storage_uri(),
    default_limits=[RATE_LIMITS["default"]],
)


def get_rate_limit(bucket: str) -> str:
    """Limit string for a named bucket, falling back to the default."""
    return RATE_LIMITS.get(bucket, RATE_LIMITS["default"])
