from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from premium_service.domain.premium import Tier

# Guild ids are 64-bit snowflakes, larger than a JSON number can hold safely,
# so they go over the wire as decimal strings.
GuildId = Annotated[int, PlainSerializer(str, return_type=str)]


class Guild(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    guild_id: GuildId
    guild_name: str | None = None
    premium: Tier
    tx_time_unix: int | None = None
    transferred_to: GuildId | None = None
    inherits_from: GuildId | None = None


class GuildCreate(BaseModel):
    guild_id: str = Field(..., description="Guild id as a decimal string")
    guild_name: str | None = Field(None, max_length=100)


class PremiumStatus(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    guild_id: GuildId
    tier: Tier
    tx_time_unix: int | None = None
    days_remaining: int | None = Field(
        None, description="Days left in the guild's own subscription, if it has one"
    )
    active: bool
    transferred_to: GuildId | None = None
    inherits_from: GuildId | None = None
