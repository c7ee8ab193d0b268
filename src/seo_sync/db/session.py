from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from seo_sync.config.settings import get_settings
from seo_sync.errors import ConfigurationError

_engine = None
_session_factory: sessionmaker[Session] | None = None


def get_engine():
    global _engine
    if _engine is not None:
        return _engine
    database_url = get_settings().database_url
    if not database_url:
        raise ConfigurationError("DATABASE_URL is not set")
    _engine = create_engine(database_url, pool_pre_ping=True)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            autoflush=False, autocommit=False, bind=get_engine()
        )
    return _session_factory


def get_session() -> Session:
    return get_session_factory()()
