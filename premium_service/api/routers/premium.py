from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from premium_service.api.deps import get_db
from premium_service.schemas.guild import Guild
from premium_service.schemas.premium import (
    PremiumTransferRequest,
    PremiumTransferResult,
)
from premium_service.services.premium import add_gold_sub_server, transfer_premium

router = APIRouter(prefix="/premium", tags=["premium"])


@router.post("/transfers", response_model=PremiumTransferResult)
def create_premium_transfer(
    transfer_data: PremiumTransferRequest,
    db: Session = Depends(get_db),
):
    """
    Transfer premium from the origin guild to the destination guild.

    The origin is closed to further transfers afterwards. A rejected transfer
    returns 409 with the failed rule as ``code``.
    """
    origin, dest = transfer_premium(
        db, transfer_data.origin_guild_id, transfer_data.dest_guild_id
    )
    return PremiumTransferResult(
        origin=Guild.model_validate(origin),
        destination=Guild.model_validate(dest),
    )


@router.post("/sub-servers", response_model=PremiumTransferResult)
def create_gold_sub_server(
    transfer_data: PremiumTransferRequest,
    db: Session = Depends(get_db),
):
    """
    Let the destination guild inherit premium from a Gold origin guild.
    The origin keeps its premium and may add more sub-servers.
    """
    origin, dest = add_gold_sub_server(
        db, transfer_data.origin_guild_id, transfer_data.dest_guild_id
    )
    return PremiumTransferResult(
        origin=Guild.model_validate(origin),
        destination=Guild.model_validate(dest),
    )
