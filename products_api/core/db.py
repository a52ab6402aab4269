# products_api/core/db.py
from __future__ import annotations

import os
from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase

from products_api.core.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for the SQLAlchemy models."""


def _database_url() -> str:
    # 1) Environment (tests, CI, docker)
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url

    # 2) Settings (.env / DB_* pieces)
    return get_settings().database_url_resolved


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_engine(_database_url(), pool_pre_ping=get_settings().db_pool_pre_ping)


def dispose_engine() -> None:
    """Close pooled connections, only if the engine was ever created."""
    if get_engine.cache_info().currsize == 0:
        return
    get_engine().dispose()
    get_engine.cache_clear()
