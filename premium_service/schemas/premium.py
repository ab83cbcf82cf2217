from pydantic import BaseModel, Field

from premium_service.schemas.guild import Guild


class PremiumTransferRequest(BaseModel):
    origin_guild_id: str = Field(..., description="Guild giving premium, as a decimal string")
    dest_guild_id: str = Field(..., description="Guild receiving premium, as a decimal string")


class PremiumTransferResult(BaseModel):
    origin: Guild
    destination: Guild
