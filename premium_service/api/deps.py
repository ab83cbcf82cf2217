from premium_service.db import SessionLocal


def get_db():
    """One pooled session per request, held for the whole read-evaluate-write sequence."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
