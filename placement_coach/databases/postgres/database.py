from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from placement_coach.config import get_settings

settings = get_settings()

_engine_kw: dict = {}
if settings.database_url.startswith("sqlite"):
    _engine_kw = {"connect_args": {"check_same_thread": False}}
else:
    _engine_kw = {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}

engine = create_engine(settings.database_url, **_engine_kw)

sessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    """FastAPI dependency that yields a database session"""
    db = sessionLocal()
    try:
        yield db
    finally:
        db.close()
