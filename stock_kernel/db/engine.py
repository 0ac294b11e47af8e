"""
Module: stock_kernel.db.engine
Responsibility: Process-wide database handle for the SQL-backed store.
    Holds the one Engine and the Session factory built on it, creates and
    drops the ledger tables, and offers ``session_scope()`` for scripts that
    work on a bare Session instead of a ``SqlAlchemyStore``.
Architecture position: Kernel > DB.  ``create_tables()`` reaches up to
    ``stock_modules._orm_registry`` lazily so every ledger table is known.

Invariants enforced:
    - In-memory SQLite runs on a single shared connection (``StaticPool``);
      otherwise each Session would see its own empty database.
    - Sessions keep loaded attributes after commit (``expire_on_commit=False``)
      so DTOs can be built from rows after the transaction closes.

Failure modes:
    - RuntimeError from every accessor until ``init_engine_from_url()`` ran.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from stock_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_sessions: sessionmaker[Session] | None = None


def _engine_options(database_url: str, echo: bool) -> dict[str, Any]:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return {
            "echo": echo,
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {"echo": echo, "pool_pre_ping": True}


def init_engine_from_url(database_url: str, echo: bool = False) -> Engine:
    """Bind the process to ``database_url`` (``sqlite://`` for an in-memory ledger)."""
    global _engine, _sessions

    _engine = create_engine(database_url, **_engine_options(database_url, echo))
    _sessions = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info("engine_initialized", extra={
        "dialect": _engine.dialect.name,
        "in_memory": isinstance(_engine.pool, StaticPool),
    })
    return _engine


def _require_engine() -> tuple[Engine, sessionmaker[Session]]:
    if _engine is None or _sessions is None:
        raise RuntimeError("No database bound; call init_engine_from_url() first")
    return _engine, _sessions


def get_engine() -> Engine:
    return _require_engine()[0]


def get_session() -> Session:
    """A new Session; the caller owns it and must close it."""
    return _require_engine()[1]()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session committed on clean exit, rolled back on error, always closed."""
    session = get_session()
    try:
        yield session
        session.commit()
        logger.debug("transaction_committed")
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create every ledger table that does not exist yet."""
    from stock_kernel.db.base import Base
    from stock_modules._orm_registry import import_all_orm_models

    import_all_orm_models()
    Base.metadata.create_all(get_engine())
    logger.info("tables_created", extra={"tables": sorted(Base.metadata.tables)})


def drop_tables() -> None:
    from stock_kernel.db.base import Base

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose of the engine and forget the binding."""
    global _engine, _sessions

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _sessions = None
