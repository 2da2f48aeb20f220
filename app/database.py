from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from app.config.settings import AppConfig

DATABASE_URL = AppConfig.DATABASE_URL


def build_engine(url: str):
    """Create an engine with the connect args the backend needs"""
    if url.lower().startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    # If you're using PostgreSQL on Render or similar, keep sslmode=require
    if url.lower().startswith("postgres"):
        return create_engine(url, connect_args={"sslmode": "require"}, pool_pre_ping=True)
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# Required wherever a DB session is needed
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create all tables that do not exist yet"""
    # Models must be imported so they register on Base.metadata
    from app.models import task, user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
