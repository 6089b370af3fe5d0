"""
Request throttling for the public invitation endpoints
"""

import time
from typing import Dict, List, Optional

from event_creator.core.config import settings

WINDOW_SECONDS = 60.0

# Recent request times per client IP; IPs with none in the window are dropped
rate_limiter: Dict[str, List[float]] = {}

def _evict_idle(cutoff: float) -> None:
    for client_ip in [ip for ip, times in rate_limiter.items() if not times or times[-1] <= cutoff]:
        del rate_limiter[client_ip]

def rate_limit_check(
    client_ip: str,
    limit: Optional[int] = None,
    now: Optional[float] = None
) -> bool:
    """Sliding one-minute window per IP; False once the limit is reached"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE
    if now is None:
        now = time.time()
    cutoff = now - WINDOW_SECONDS

    _evict_idle(cutoff)
    recent = [t for t in rate_limiter.get(client_ip, []) if t > cutoff]
    if len(recent) >= limit:
        rate_limiter[client_ip] = recent
        return False

    recent.append(now)
    rate_limiter[client_ip] = recent
    return True

def get_client_ip(request) -> str:
    """First forwarded address, then the proxy header, then the socket peer"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
