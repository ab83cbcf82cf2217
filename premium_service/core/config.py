from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(alias="DATABASE_URL")

    # Redis (identify lock)
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    redis_key_prefix: str = Field(default="automuteus", alias="REDIS_KEY_PREFIX")
    identify_lock_ttl_seconds: int = Field(default=5, alias="IDENTIFY_LOCK_TTL_SECONDS")
    identify_lock_poll_seconds: float = Field(
        default=5, alias="IDENTIFY_LOCK_POLL_SECONDS"
    )

    # Premium subscription lengths, in days
    standard_subscription_days: int = Field(
        default=31, alias="STANDARD_SUBSCRIPTION_DAYS"
    )
    gold_subscription_days: int = Field(default=31, alias="GOLD_SUBSCRIPTION_DAYS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("standard_subscription_days", "gold_subscription_days")
    @classmethod
    def validate_subscription_days(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Subscription length must be greater than 0 days")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str:
        """Accept lower-case level names and treat empty strings as the default."""
        if not v:
            return "INFO"
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
