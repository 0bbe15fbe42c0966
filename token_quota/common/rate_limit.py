"""Rate limiting utilities."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

RATE_LIMIT = f"{settings.rate_limit_per_minute}/minute"

# Application-wide shared limit, counted per client IP
limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[RATE_LIMIT]
)
