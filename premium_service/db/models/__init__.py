from premium_service.db.models.guild import Guild

__all__ = ["Guild"]
