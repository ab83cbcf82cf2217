from premium_service.services.identify_lock import (
    get_redis,
    is_token_locked,
    lock_for_token,
    wait_for_token,
)

__all__ = ["get_redis", "is_token_locked", "lock_for_token", "wait_for_token"]
