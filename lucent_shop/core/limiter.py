# lucent_shop/core/limiter.py

import logging
from typing import Optional

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from lucent_shop.core.config import settings
from lucent_shop.models.user import User

logger = logging.getLogger(__name__)

# --- Request identity for rate limiting ---

def key_func(request: Request) -> str:
    """
    Identifies the caller for rate limiting.
    Authenticated user id first, remote IP otherwise.
    """
    # Set by get_current_user when the endpoint requires auth
    user: Optional[User] = getattr(request.state, "user", None)

    if user and user.id:
        return f"user:{user.id}"

    return get_remote_address(request)

# --- Limiter instance ---

# Counters live in Redis so every worker shares them.
# 'moving-window' is stricter than fixed windows around the boundary.
limiter = Limiter(
    key_func=key_func,
    storage_uri=settings.REDIS_URL,
    strategy="moving-window",
)
