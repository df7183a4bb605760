# billing/db/engine.py

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from billing.config import get_settings


@lru_cache(maxsize=None)
def get_engine() -> Engine:
    """
    Process-wide engine; every request checks a connection out of its pool.
    """
    settings = get_settings()
    return build_engine(settings.database_url)


def build_engine(url: str) -> Engine:
    settings = get_settings()
    options = {"echo": settings.echo, "future": True}

    # In-memory SQLite uses a singleton pool that takes no sizing options
    if make_url(url).database not in (None, "", ":memory:"):
        options.update(
            pool_size=settings.pool_size,
            pool_timeout=settings.pool_timeout,
            pool_recycle=settings.pool_recycle,
            pool_pre_ping=True,
        )

    return create_engine(url, **options)
