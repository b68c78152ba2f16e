# app/data/database.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.utils.deadline import check_deadline
from app.utils.settings import DATABASE_URL, DB_POOL_TIMEOUT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


def build_engine(url: str = DATABASE_URL):
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=DB_POOL_TIMEOUT_SECONDS,
    )


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Dependency FastAPI - jedna sesja na request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Granica transakcji dla operacji wielokrokowych.
    Commit jesli blok przejdzie i request miesci sie w limicie czasu,
    rollback przy kazdym wyjatku.
    """
    try:
        yield db
        check_deadline()
        db.commit()
    except Exception:
        logger.warning("Rollback transakcji")
        db.rollback()
        raise
