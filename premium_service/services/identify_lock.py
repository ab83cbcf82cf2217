"""Cross-process identify lock for bot tokens.

A cooperative mutex over Redis: a holder sets a short-lived key for the token,
and other processes poll until the key has expired. The token itself never
appears in the key, only its SHA-256 digest.

The premium endpoints do not use it. It is exported from
``premium_service.services`` for the processes that share a bot token and
must serialize their gateway identify calls.
"""

import hashlib
import logging
import time
from collections.abc import Callable

import redis

from premium_service.core.config import settings

logger = logging.getLogger(__name__)


def get_redis() -> redis.Redis:
    return redis.Redis.from_url(settings.redis_url)


def token_lock_key(token: str) -> str:
    digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
    return f"{settings.redis_key_prefix}:token:lock:{digest}"


def lock_for_token(
    client: redis.Redis, token: str, ttl: int | None = None
) -> None:
    """Hold the identify lock for ``ttl`` seconds. Failures are logged, not raised."""
    ttl = settings.identify_lock_ttl_seconds if ttl is None else ttl
    logger.info("Locking token for %s seconds", ttl)
    try:
        client.set(token_lock_key(token), "", ex=ttl)
    except redis.RedisError as e:
        logger.error("Failed to lock token: %s", e)


def is_token_locked(client: redis.Redis, token: str) -> bool:
    try:
        return client.exists(token_lock_key(token)) == 1
    except redis.RedisError as e:
        # An unreachable Redis must not block identify forever.
        logger.error("Failed to check token lock: %s", e)
        return False


def wait_for_token(
    client: redis.Redis,
    token: str,
    poll_interval: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    poll_interval = (
        settings.identify_lock_poll_seconds if poll_interval is None else poll_interval
    )
    while is_token_locked(client, token):
        logger.info(
            "Sleeping for %s seconds while waiting for token to become available",
            poll_interval,
        )
        sleep(poll_interval)
