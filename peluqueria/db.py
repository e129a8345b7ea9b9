# peluqueria/db.py

import logging

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlmodel import SQLModel, Session, create_engine

from .config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False, **kwargs):
    """Engine for the given URL; SQLite gets thread sharing and enforced foreign keys."""
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        # MySQL drops idle connections
        kwargs.setdefault("pool_pre_ping", True)

    engine = create_engine(database_url, echo=echo, **kwargs)

    if database_url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


# Engine = connection to the database
engine = build_engine(settings.database_url, echo=settings.db_echo)


def init_db(bind=None):
    from . import models  # noqa: F401  registers the tables

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables ready")


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session


def display_url(database_url: str) -> str:
    """Database URL safe for logs: the password is masked."""
    return make_url(database_url).render_as_string(hide_password=True)
