from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from videohub.config import settings
from videohub.logger import db_logger

# Base class for models
Base = declarative_base()


class DatabaseConnectionError(RuntimeError):
    """Raised when the database cannot be reached at startup."""


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Single shared connection so in-memory databases survive across sessions
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    if settings.is_production:
        return {
            "pool_pre_ping": True,
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 1800,  # recycle every 30min to avoid stale connections
        }
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }


class Database:
    """
    Owns the SQLAlchemy engine and session factory for one database URL.

    The handle is created once per process and passed around explicitly;
    startup calls ``connect()`` and shutdown calls ``dispose()``.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: Engine = create_engine(url, echo=echo, **_engine_options(url))
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def connect(self) -> None:
        """Verify the database is reachable."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            db_logger.error(f"Database connection failed: {e}")
            raise DatabaseConnectionError(str(e)) from e

        db_logger.info(f"Database connection successful ({self.engine.url.host or 'local'})")

    def create_all(self) -> None:
        """Create all tables known to the declarative base."""
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        db_logger.info("Database connections closed")


database = Database(settings.database_url, echo=settings.debug)


def get_db():
    """Dependency for getting database session."""
    db = database.session()
    try:
        yield db
    finally:
        db.close()
