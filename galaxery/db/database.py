from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, sessionmaker, declarative_base
import os
from typing import Optional
from functools import lru_cache

# Database URLs per environment
SQLITE_DEV_DB = "sqlite:///./dev.db"
SQLITE_TEST_DB = "sqlite:///./test.db"
SQLITE_PROD_DB = "sqlite:///./prod.db"

Base = declarative_base()

@lru_cache()
def get_engine():
    """Get the database engine for the current APP_ENV"""
    env = os.getenv("APP_ENV", "development")
    if env == "test":
        DATABASE_URL = SQLITE_TEST_DB
    elif env == "production":
        DATABASE_URL = os.getenv("DATABASE_URL", SQLITE_PROD_DB)
    else:  # development
        DATABASE_URL = SQLITE_DEV_DB

    connect_args = {}
    if DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(DATABASE_URL, connect_args=connect_args)

def get_session_maker():
    """Get the session factory"""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())

def get_session():
    """Yield a database session for one request"""
    SessionLocal = get_session_maker()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

def create_tables(db_engine: Optional[object] = None):
    """Create all tables

    Args:
        db_engine: optional engine, the default engine is used when omitted
    """
    # register every model on Base.metadata
    from galaxery.models import post, post_tag, reaction, tag, user  # noqa: F401

    engine = db_engine or get_engine()
    Base.metadata.create_all(bind=engine)

SUPPORTED_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

def dialect_insert(session: Session, model):
    """INSERT construct supporting ON CONFLICT for the session's dialect.

    Only SQLite and PostgreSQL provide ON CONFLICT DO NOTHING.
    """
    name = session.get_bind().dialect.name
    if name not in SUPPORTED_INSERTS:
        raise ValueError(f"Unsupported database dialect: {name}")
    return SUPPORTED_INSERTS[name](model)
