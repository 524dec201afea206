"""
Inventory database engine and session handling using sqlalchemy
"""

import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine as _Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session


DEFAULT_DATABASE_URL: str = "sqlite://"
PRINT_SQLITE_WARNING: bool = True

Base = declarative_base()
# Models use plain type annotations instead of 'Mapped[]'
Base.__allow_unmapped__ = True
_engine: Optional[_Engine] = None
_make_session: Optional[sessionmaker] = None
_logger: logging.Logger = logging.getLogger(__name__)


def _is_in_memory(database_url: str) -> bool:
    return database_url == "sqlite://" or ":memory:" in database_url


def init(database_url: str, echo: bool = True, create_all: bool = True):
    """
    Create the database engine and the session factory for the given URL

    Call this once during startup of the server or the CLI. Sessions
    requested without a prior call fall back to ``DEFAULT_DATABASE_URL``,
    an in-memory database that vanishes with the process.

    :param database_url: SQLAlchemy URL of the database
    :param echo: log every emitted SQL statement
    :param create_all: create missing tables from the model metadata,
        which is used for tests and setups without alembic migrations
    """

    global _engine, _make_session
    engine_args = {"echo": echo}
    if database_url.startswith("sqlite:"):
        # The API handles requests in worker threads sharing the engine
        engine_args["connect_args"] = {"check_same_thread": False}
        if _is_in_memory(database_url):
            _logger.warning("The in-memory sqlite database discards all articles and lots on exit.")
        if PRINT_SQLITE_WARNING:
            _logger.warning(
                "sqlite is meant for development and tests. It ignores the row locks of guarded "
                "updates and locks the whole database for appends and moves, so use a database server in production."
            )

    _engine = create_engine(database_url, **engine_args)

    if create_all:
        # The models must be imported to register their tables
        from . import models  # noqa
        Base.metadata.create_all(bind=_engine)

    _make_session = sessionmaker(autocommit=False, autoflush=False, bind=_engine)


def _ensure_initialized(what: str):
    if _engine is None or _make_session is None:
        _logger.warning(
            f"The database {what} was requested before 'init' was called, "
            f"falling back to the non-persistent {DEFAULT_DATABASE_URL!r}"
        )
        init(DEFAULT_DATABASE_URL)


def get_engine() -> _Engine:
    _ensure_initialized("engine")
    return _engine


def get_new_session() -> Session:
    _ensure_initialized("session")
    return _make_session()
