# /concierge/utils/rate_limiter.py

from fastapi import Request
from slowapi import Limiter
from concierge.config.settings import settings

# Coarse per-IP HTTP limiter shared by main.py and the routers. Per-user chat
# admission is a separate concern handled by services/admission_service.py.


def get_remote_address(request: Request) -> str:
    """Client IP, preferring the first X-Forwarded-For hop set by the proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.ip_rate_limit_per_minute}/minute"],
    enabled=settings.environment != "test",
)
