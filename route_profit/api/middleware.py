"""Per-client rate limiting (slowapi)."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from route_profit.config import settings

limiter = Limiter(key_func=get_remote_address)

# Applied to every public endpoint via ``@limiter.limit(RATE_LIMIT)``
RATE_LIMIT = settings.rate_limit
