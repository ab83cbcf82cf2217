from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from premium_service.core.config import settings


def normalize_database_url(url: str) -> str:
    """Use the psycopg3 driver for plain postgresql:// URLs. SQLite (tests) is left alone."""
    if url.startswith("postgresql://") and "+psycopg" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


# Each request checks out one pooled connection for its whole read-evaluate-write
# sequence; pre-ping drops connections the server has closed.
engine = create_engine(normalize_database_url(settings.database_url), pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
