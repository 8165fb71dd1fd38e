"""
Rate limiting for the model-backed recipe endpoints.

Search, analysis and description enhancement each trigger paid model calls,
so they share one per-client limit (SEARCH_RATE_LIMIT, e.g. "30/minute").
Clients are keyed by their real IP behind a proxy.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from app.config import get_settings


def get_real_ip(request: Request) -> str:
    """
    Extract the client IP from proxy headers, falling back to the peer address.

    Priority: first entry of X-Forwarded-For, then X-Real-IP, then
    request.client.host.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # "client, proxy1, proxy2"
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def model_endpoint_limit() -> str:
    return get_settings().search_rate_limit


limiter = Limiter(key_func=get_real_ip)
