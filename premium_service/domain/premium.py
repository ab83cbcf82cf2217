from __future__ import annotations

import time
from enum import IntEnum

SECS_IN_A_DAY = 86400


class Tier(IntEnum):
    """Premium tier as stored in the ``guilds.premium`` column."""

    FREE = 0
    STANDARD = 1
    GOLD = 2

    @property
    def is_paid(self) -> bool:
        return self is not Tier.FREE


def now_unix() -> int:
    return int(time.time())


def days_remaining(*, tx_time_unix: int, now: int, duration_days: int) -> int:
    """Days left in a subscription that started at ``tx_time_unix``.

    Elapsed time is floored to whole days. Both the origin expiry check and the
    destination occupancy check must go through this function so a subscription
    is never "expired" for one and "active" for the other.
    """
    elapsed_days = (now - tx_time_unix) // SECS_IN_A_DAY
    return duration_days - elapsed_days


def is_expired(tier: Tier, remaining_days: int) -> bool:
    # A free tier has nothing to expire, so it always counts as expired.
    return tier is Tier.FREE or remaining_days <= 0
