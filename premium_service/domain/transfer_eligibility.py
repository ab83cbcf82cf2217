"""Eligibility rules for moving premium between guilds.

A transfer hands the origin's tier to the destination and closes the origin.
A grant (Gold sub-server) lends the origin's tier to the destination while the
origin keeps it. Both are single-hop only: a guild that has already given its
premium away, or that borrows premium from another guild, can take part in
neither side of a new link, so chains (A -> B -> C) and cycles (A -> B -> A)
cannot be built.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from premium_service.domain.premium import Tier, days_remaining, is_expired


class EntitlementRecord(Protocol):
    """The fields of a guild row the rules look at."""

    premium: int
    tx_time_unix: int | None
    transferred_to: int | None
    inherits_from: int | None


class RejectionReason(str, Enum):
    MISSING_RECORD = "MISSING_RECORD"
    ORIGIN_NOT_ENTITLED = "ORIGIN_NOT_ENTITLED"
    ORIGIN_NOT_GOLD_TIER = "ORIGIN_NOT_GOLD_TIER"
    ORIGIN_ALREADY_TRANSFERRED = "ORIGIN_ALREADY_TRANSFERRED"
    ORIGIN_IS_INHERITOR = "ORIGIN_IS_INHERITOR"
    DEST_ALREADY_TRANSFERRED = "DEST_ALREADY_TRANSFERRED"
    DEST_IS_INHERITOR = "DEST_IS_INHERITOR"
    ORIGIN_HAS_NO_SUBSCRIPTION = "ORIGIN_HAS_NO_SUBSCRIPTION"
    ORIGIN_EXPIRED = "ORIGIN_EXPIRED"
    DEST_HAS_ACTIVE_ENTITLEMENT = "DEST_HAS_ACTIVE_ENTITLEMENT"
    DEST_HAS_FOREIGN_ENTITLEMENT = "DEST_HAS_FOREIGN_ENTITLEMENT"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    RejectionReason.MISSING_RECORD: "Origin or destination server not found",
    RejectionReason.ORIGIN_NOT_ENTITLED: (
        "Origin server is free tier and cannot be transferred"
    ),
    RejectionReason.ORIGIN_NOT_GOLD_TIER: (
        "Only gold premium servers can add inheriting sub-servers"
    ),
    RejectionReason.ORIGIN_ALREADY_TRANSFERRED: (
        "Origin server has already been transferred to another server"
    ),
    RejectionReason.ORIGIN_IS_INHERITOR: (
        "Origin server inherits premium from another server and cannot be transferred"
    ),
    RejectionReason.DEST_ALREADY_TRANSFERRED: (
        "Destination server has already transferred premium elsewhere"
    ),
    RejectionReason.DEST_IS_INHERITOR: (
        "Destination server inherits premium from another server and cannot be transferred"
    ),
    RejectionReason.ORIGIN_HAS_NO_SUBSCRIPTION: (
        "Origin server has no associated transaction and cannot be transferred"
    ),
    RejectionReason.ORIGIN_EXPIRED: (
        "Origin server has expired premium and cannot be transferred"
    ),
    RejectionReason.DEST_HAS_ACTIVE_ENTITLEMENT: (
        "Destination server has active premium and cannot be overwritten"
    ),
    RejectionReason.DEST_HAS_FOREIGN_ENTITLEMENT: (
        "Cannot transfer to a server with existing non-standard premium"
    ),
}


@dataclass(frozen=True, slots=True)
class PremiumTransferPolicy:
    """Decides whether premium may move from one guild to another "as of" ``now``.

    Expiry is recomputed from ``tx_time_unix`` on every evaluation. ``durations``
    maps each paid tier to its subscription length in days.
    """

    now: int
    durations: Mapping[Tier, int]

    def remaining_days(self, record: EntitlementRecord) -> int | None:
        if record.tx_time_unix is None:
            return None
        tier = Tier(record.premium)
        return days_remaining(
            tx_time_unix=record.tx_time_unix,
            now=self.now,
            duration_days=self.durations.get(tier, 0),
        )

    def is_active(self, record: EntitlementRecord) -> bool:
        remaining = self.remaining_days(record)
        if remaining is None:
            return False
        return not is_expired(Tier(record.premium), remaining)

    def evaluate(
        self,
        origin: EntitlementRecord | None,
        dest: EntitlementRecord | None,
        *,
        require_gold: bool = False,
    ) -> RejectionReason | None:
        """Return the first rule the pair violates, or None when it is allowed.

        ``require_gold`` selects the sub-server grant variant, which also
        demands that the origin holds the Gold tier.
        """
        if origin is None or dest is None:
            return RejectionReason.MISSING_RECORD

        origin_tier = Tier(origin.premium)
        if origin_tier is Tier.FREE:
            return RejectionReason.ORIGIN_NOT_ENTITLED

        if require_gold and origin_tier is not Tier.GOLD:
            return RejectionReason.ORIGIN_NOT_GOLD_TIER

        if origin.transferred_to is not None:
            return RejectionReason.ORIGIN_ALREADY_TRANSFERRED

        if origin.inherits_from is not None:
            return RejectionReason.ORIGIN_IS_INHERITOR

        if dest.transferred_to is not None:
            return RejectionReason.DEST_ALREADY_TRANSFERRED

        if dest.inherits_from is not None:
            return RejectionReason.DEST_IS_INHERITOR

        if origin.tx_time_unix is None:
            return RejectionReason.ORIGIN_HAS_NO_SUBSCRIPTION
        if not self.is_active(origin):
            return RejectionReason.ORIGIN_EXPIRED

        if dest.tx_time_unix is not None:
            if self.is_active(dest):
                return RejectionReason.DEST_HAS_ACTIVE_ENTITLEMENT
        elif Tier(dest.premium) is not Tier.FREE:
            # Paid tier without a recorded transaction; refuse rather than guess.
            return RejectionReason.DEST_HAS_FOREIGN_ENTITLEMENT

        return None
