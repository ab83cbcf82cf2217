import logging
import re
from dataclasses import dataclass

from sqlalchemy.orm import Session

import premium_service.repositories.guild as guild_repo
from premium_service.core.config import settings
from premium_service.db.models.guild import Guild as GuildModel
from premium_service.domain.premium import Tier, now_unix
from premium_service.domain.transfer_eligibility import PremiumTransferPolicy
from premium_service.errors import (
    DuplicateResourceError,
    MalformedIdentifierError,
    NotFoundError,
    TransferRejectedError,
)

logger = logging.getLogger(__name__)

_GUILD_ID_PATTERN = re.compile(r"[0-9]+")
# guilds.guild_id is a signed BIGINT
_MAX_GUILD_ID = 2**63 - 1


@dataclass(frozen=True, slots=True)
class PremiumStatus:
    guild_id: int
    tier: Tier
    tx_time_unix: int | None
    days_remaining: int | None
    active: bool
    transferred_to: int | None
    inherits_from: int | None


def parse_guild_id(value: str) -> int:
    """Parse a decimal-string guild identifier."""
    if not isinstance(value, str) or not _GUILD_ID_PATTERN.fullmatch(value):
        raise MalformedIdentifierError(value)
    guild_id = int(value)
    if guild_id > _MAX_GUILD_ID:
        raise MalformedIdentifierError(value)
    return guild_id


def build_policy(now: int | None = None) -> PremiumTransferPolicy:
    return PremiumTransferPolicy(
        now=now_unix() if now is None else now,
        durations={
            Tier.STANDARD: settings.standard_subscription_days,
            Tier.GOLD: settings.gold_subscription_days,
        },
    )


def _load_pair(
    db: Session, origin: str, dest: str
) -> tuple[int, int, GuildModel | None, GuildModel | None]:
    # Both ids are validated before anything is read from the store.
    origin_id = parse_guild_id(origin)
    dest_id = parse_guild_id(dest)
    origin_guild = guild_repo.get_guild_by_id(db, origin_id)
    dest_guild = guild_repo.get_guild_by_id(db, dest_id)
    return origin_id, dest_id, origin_guild, dest_guild


def _check(
    policy: PremiumTransferPolicy,
    origin_guild: GuildModel | None,
    dest_guild: GuildModel | None,
    *,
    require_gold: bool,
    operation: str,
    origin_id: int,
    dest_id: int,
) -> None:
    reason = policy.evaluate(origin_guild, dest_guild, require_gold=require_gold)
    if reason is not None:
        logger.info(
            "Rejected %s from guild %s to guild %s: %s",
            operation,
            origin_id,
            dest_id,
            reason.value,
        )
        raise TransferRejectedError(reason)


def transfer_premium(
    db: Session, origin: str, dest: str, now: int | None = None
) -> tuple[GuildModel, GuildModel]:
    """
    Move the origin guild's premium to the destination guild.

    - Validates both identifiers
    - Evaluates the transfer rules as of ``now``
    - Links dest -> origin (inherits_from) and origin -> dest (transferred_to)
      in one transaction

    Raises:
        MalformedIdentifierError: If either id is not a decimal integer.
        TransferRejectedError: If a transfer rule fails. Nothing is written.
        SQLAlchemyError: If the store fails. Propagated unchanged, not retried.
    """
    origin_id, dest_id, origin_guild, dest_guild = _load_pair(db, origin, dest)
    _check(
        build_policy(now),
        origin_guild,
        dest_guild,
        require_gold=False,
        operation="premium transfer",
        origin_id=origin_id,
        dest_id=dest_id,
    )
    return guild_repo.mark_guild_transfer(db, origin_id=origin_id, dest_id=dest_id)


def add_gold_sub_server(
    db: Session, origin: str, dest: str, now: int | None = None
) -> tuple[GuildModel, GuildModel]:
    """
    Let the destination guild inherit the origin guild's Gold premium.

    The origin keeps its own premium and is not marked as transferred, so it
    can add further sub-servers.

    Raises:
        MalformedIdentifierError: If either id is not a decimal integer.
        TransferRejectedError: If the origin is not Gold or another rule fails.
        SQLAlchemyError: If the store fails.
    """
    origin_id, dest_id, origin_guild, dest_guild = _load_pair(db, origin, dest)
    _check(
        build_policy(now),
        origin_guild,
        dest_guild,
        require_gold=True,
        operation="gold sub-server grant",
        origin_id=origin_id,
        dest_id=dest_id,
    )
    dest_guild = guild_repo.set_guild_inherits_from(
        db, guild_id=dest_id, inherits_from=origin_id
    )
    return origin_guild, dest_guild


def get_premium_status(
    db: Session, guild_id: str, now: int | None = None
) -> PremiumStatus:
    """Derived premium state of one guild. Expiry is computed, never stored."""
    parsed_id = parse_guild_id(guild_id)
    guild = guild_repo.get_guild_by_id(db, parsed_id)
    if not guild:
        raise NotFoundError(f"Guild with id {parsed_id} not found")

    policy = build_policy(now)
    return PremiumStatus(
        guild_id=guild.guild_id,
        tier=Tier(guild.premium),
        tx_time_unix=guild.tx_time_unix,
        days_remaining=policy.remaining_days(guild),
        active=policy.is_active(guild),
        transferred_to=guild.transferred_to,
        inherits_from=guild.inherits_from,
    )


def register_guild(
    db: Session, guild_id: str, guild_name: str | None = None
) -> GuildModel:
    """Create the free-tier record for a guild seen for the first time."""
    parsed_id = parse_guild_id(guild_id)
    if guild_repo.get_guild_by_id(db, parsed_id):
        raise DuplicateResourceError(f"Guild with id {parsed_id} already exists")

    guild = guild_repo.create_guild(db, guild_id=parsed_id, guild_name=guild_name)
    logger.info("Registered guild %s", parsed_id)
    return guild

