import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from bus_booking.config import settings

logger = logging.getLogger(__name__)

_connect_args = {}
if settings.database_url.startswith("sqlite"):
    # FastAPI serves sync routes from a threadpool
    _connect_args["check_same_thread"] = False

try:
    engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,
        connect_args=_connect_args,
        echo=False,
    )
    logger.info(f"Database engine created for {engine.url.get_backend_name()}")
except Exception as e:
    logger.error(f"Failed to create database engine: {e}")
    raise

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables registered on Base"""
    from bus_booking import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
