"""Database engine and sessions for the conversion history archive."""

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from radix_app.config import settings
from radix_app.logging_config import get_logger
from radix_app.models.database import Base

logger = get_logger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create the engine for the history database.

    SQLite is used locally and in tests, PostgreSQL in deployments.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Configured SQLAlchemy engine
    """
    if database_url.startswith("sqlite://"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},  # Needed for SQLite
            echo=False,
        )

    return create_engine(
        database_url,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        pool_pre_ping=True,
        echo=False,
    )


engine = build_engine(settings.database_url)

# Database sessions, distinct from conversion sessions
DbSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(bind: Engine = engine):
    """Create the conversion history table if it does not exist."""
    Base.metadata.create_all(bind=bind)
    logger.info("History tables ready", tables=sorted(Base.metadata.tables))


def ping_database(db: Session) -> None:
    """Run a trivial query to check the history database is reachable.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database cannot be queried
    """
    db.execute(text("SELECT 1"))


def get_db():
    """Dependency to get database session."""
    db = DbSessionLocal()
    try:
        yield db
    finally:
        db.close()
