from premium_service.db.base import SessionLocal

__all__ = ["SessionLocal"]
