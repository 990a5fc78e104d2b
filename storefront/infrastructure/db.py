import time
from typing import Iterator
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from storefront.core_settings import get_settings
from storefront.core.logging_config import get_logger
from storefront.domain.models import Base

logger = get_logger(__name__)

def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(url, echo=False, future=True, connect_args={"check_same_thread": False})

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(url, echo=False, future=True, pool_pre_ping=True)

settings = get_settings()
DATABASE_URL = settings.database_url
engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_models():
    Base.metadata.create_all(engine)

def wait_for_database(max_attempts: int = 30, delay: float = 1.0) -> int:
    """Block until the database answers ``SELECT 1``; returns the attempt count."""
    for attempt in range(1, max_attempts + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info(f"Database ready after {attempt} attempt(s)")
            return attempt
        except Exception as e:
            logger.warning(f"Database not ready (attempt {attempt}/{max_attempts}): {e}")
            if attempt == max_attempts:
                raise
            time.sleep(delay)
    return max_attempts
