from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from premium_service.api.deps import get_db
from premium_service.schemas.guild import Guild, GuildCreate, PremiumStatus
from premium_service.services.premium import get_premium_status, register_guild

router = APIRouter(prefix="/guilds", tags=["guilds"])


@router.post("", response_model=Guild, status_code=status.HTTP_201_CREATED)
def create_guild(guild_data: GuildCreate, db: Session = Depends(get_db)):
    """
    Register a guild the first time it interacts with the service.
    New guilds start on the free tier with no premium links.
    """
    guild = register_guild(db, guild_data.guild_id, guild_name=guild_data.guild_name)
    return Guild.model_validate(guild)


@router.get("/{guild_id}/premium", response_model=PremiumStatus)
def get_guild_premium(guild_id: str, db: Session = Depends(get_db)):
    return PremiumStatus.model_validate(get_premium_status(db, guild_id))
