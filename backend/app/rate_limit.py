import os

from slowapi import Limiter
from slowapi.util import get_remote_address

LOGIN_LIMIT = "10/minute"
REGISTER_LIMIT = "5/minute"


def _rate_limit_enabled() -> bool:
    return os.environ.get("RATE_LIMIT_ENABLED", "true").lower() not in ("false", "0", "no")


limiter = Limiter(key_func=get_remote_address, enabled=_rate_limit_enabled())
