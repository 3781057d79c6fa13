from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import redis
from .config import settings

def build_engine(database_url: str) -> Engine:
    """Create an engine whose store interactions are all bounded by a timeout."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.DB_CONNECT_TIMEOUT,
            },
        )

    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=1800,  # Recycle connections after 30 minutes
        pool_pre_ping=True,
        connect_args={
            "connect_timeout": settings.DB_CONNECT_TIMEOUT,
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        },
    )

engine = build_engine(settings.get_database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Redis setup - in-memory counter for testing
if settings.TESTING:
    class RedisMock:
        def __init__(self):
            self.data = {}
            self.ttls = {}

        def get(self, key):
            return self.data.get(key)

        def expire(self, key, time):
            if key not in self.data:
                return False
            self.ttls[key] = time
            return True

        def ttl(self, key):
            if key not in self.data:
                return -2
            return self.ttls.get(key, -1)

        def incr(self, key):
            self.data[key] = str(int(self.data.get(key, 0)) + 1)
            return int(self.data[key])

        def flushall(self):
            self.data.clear()
            self.ttls.clear()
            return True

    redis_client = RedisMock()
else:
    redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)

# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Redis dependency
def get_redis():
    """Get Redis client."""
    return redis_client

def check_connection(bind: Engine = engine) -> None:
    """Round-trip a trivial statement; raises if the store is unreachable."""
    with bind.connect() as connection:
        connection.execute(text("SELECT 1"))

# Database initialization
def init_db(bind: Engine = engine):
    """Initialize database tables."""
    # Register models on Base.metadata
    from ..models import appointment, user  # noqa: F401

    Base.metadata.create_all(bind=bind)
