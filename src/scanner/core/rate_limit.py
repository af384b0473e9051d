from slowapi import Limiter
from slowapi.util import get_remote_address

from scanner.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def session_write_limit() -> str:
    """Limit für schreibende Session-Endpunkte, z. B. "100 per 60 seconds"."""
    settings = get_settings()
    return f"{settings.rate_limit_requests} per {settings.rate_limit_window_seconds} seconds"
