import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from premium_service.db.models.guild import Guild as GuildModel
from premium_service.domain.transfer_eligibility import RejectionReason
from premium_service.errors import (
    DuplicateResourceError,
    NotFoundError,
    TransferRejectedError,
)

logger = logging.getLogger(__name__)


def get_guild_by_id(db: Session, guild_id: int) -> GuildModel | None:
    """Get a guild by ID."""
    return db.query(GuildModel).filter(GuildModel.guild_id == guild_id).first()


def create_guild(
    db: Session,
    guild_id: int,
    guild_name: str | None = None,
    premium: int = 0,
    tx_time_unix: int | None = None,
) -> GuildModel:
    """Create a new guild in the database. Pure data access - no business logic."""
    db_guild = GuildModel(
        guild_id=guild_id,
        guild_name=guild_name,
        premium=premium,
        tx_time_unix=tx_time_unix,
    )
    db.add(db_guild)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # Another request registered the same guild between check and insert
        if db.get(GuildModel, guild_id) is not None:
            raise DuplicateResourceError(
                f"Guild with id {guild_id} already exists"
            ) from e
        raise
    db.refresh(db_guild)
    return db_guild


def _update_unlinked(db: Session, guild_id: int, **values) -> bool:
    """
    Update a guild only if it has neither premium link set.

    The guard is evaluated by the store at write time, so a link committed by a
    concurrent request after our read makes this return False.
    """
    result = db.execute(
        update(GuildModel)
        .where(
            GuildModel.guild_id == guild_id,
            GuildModel.transferred_to.is_(None),
            GuildModel.inherits_from.is_(None),
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _apply_links(
    db: Session, origin_id: int, dest_id: int, origin_values: dict
) -> None:
    # Origin row first: it is the row every transfer and grant from it touches.
    try:
        if not _update_unlinked(db, origin_id, **origin_values):
            db.rollback()
            raise TransferRejectedError(RejectionReason.ORIGIN_ALREADY_TRANSFERRED)
        if not _update_unlinked(db, dest_id, inherits_from=origin_id):
            db.rollback()
            raise TransferRejectedError(RejectionReason.DEST_IS_INHERITOR)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def set_guild_inherits_from(
    db: Session, guild_id: int, inherits_from: int
) -> GuildModel:
    """
    Mark a guild as borrowing premium from another guild.

    The source guild keeps its premium, but its row is still claimed (with a
    no-op write) so a concurrent transfer away from it cannot slip in.

    Raises:
        TransferRejectedError: If either guild gained a premium link since it was read.
    """
    _apply_links(db, inherits_from, guild_id, {"transferred_to": None})
    guild = get_guild_by_id(db, guild_id)
    if not guild:
        raise NotFoundError("Guild not found")
    db.refresh(guild)
    logger.info("Marked guild %s as inheriting from %s", guild_id, inherits_from)
    return guild


def mark_guild_transfer(
    db: Session, origin_id: int, dest_id: int
) -> tuple[GuildModel, GuildModel]:
    """
    Record a completed transfer: dest inherits from origin, origin is transferred to dest.

    Both links are written in a single transaction, so a failure leaves
    neither guild modified.

    Raises:
        TransferRejectedError: If either guild gained a premium link since it was read.
    """
    _apply_links(db, origin_id, dest_id, {"transferred_to": dest_id})
    origin = get_guild_by_id(db, origin_id)
    dest = get_guild_by_id(db, dest_id)
    if not origin or not dest:
        raise NotFoundError("Guild not found")
    db.refresh(origin)
    db.refresh(dest)
    logger.info("Marked guild %s as inheriting from %s", dest_id, origin_id)
    logger.info("Marked guild %s as transferred to %s", origin_id, dest_id)
    return origin, dest
