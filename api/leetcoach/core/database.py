from sqlmodel import SQLModel, create_engine, Session
from leetcoach.core.config import settings
import logging

logger = logging.getLogger(__name__)

# Ensure the URL uses postgresql:// (not postgres://) for SQLAlchemy
db_url = settings.database_url
if db_url.startswith("postgres://"):
    # SQLAlchemy prefers postgresql:// over postgres://
    db_url = db_url.replace("postgres://", "postgresql://", 1)

logger.info(f"Connecting to database: {db_url[:20]}...")  # Log partial URL for debugging

if db_url.startswith("sqlite"):
    # SQLite pools do not take size options; digest workers use their own threads
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        db_url,
        echo=False,  # Set to False in production to reduce logs
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )


def get_session():
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session


def get_session_factory():
    """
    Dependency returning a callable that opens a new session.

    Concurrent work (the daily digest) needs one session per thread, so it is
    handed a factory instead of a single session.
    """
    return lambda: Session(engine)


def init_db():
    """Initialize database tables."""
    SQLModel.metadata.create_all(engine)
