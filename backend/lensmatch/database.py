import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool, StaticPool

from .config import settings

logger = logging.getLogger(__name__)

APP_ENV = settings.APP_ENV.lower()  # "dev" | "prod"


def _make_engine():
    url = settings.DB_URL

    # SQLite in memory (local runs): one shared connection
    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            url,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # Dev: no pool, connection released after every request
    if APP_ENV != "prod":
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        return create_engine(
            url,
            future=True,
            pool_pre_ping=True,
            poolclass=NullPool,
            connect_args=connect_args,
        )

    # Prod: small, conservative pool
    return create_engine(
        url,
        future=True,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
        pool_recycle=1800,
    )


engine = _make_engine()
logger.info("Database engine ready (env=%s)", APP_ENV)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
