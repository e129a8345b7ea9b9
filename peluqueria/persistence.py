# peluqueria/persistence.py
"""Unit-of-work helpers returning tagged results instead of raising.

Every write goes through ``add_record``, ``save_record`` or ``remove_record``.
The routes turn the ``Result`` into an HTTP answer with ``unwrap``.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import delete, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import Session

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    ok = "ok"
    not_found = "not_found"
    conflict = "conflict"
    error = "error"


@dataclass
class Result:
    outcome: Outcome
    record: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.ok


def _cause(exc: Exception) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def row_exists(session: Session, model, pk) -> bool:
    pk_column = inspect(model).primary_key[0]
    return session.execute(select(pk_column).where(pk_column == pk)).first() is not None


def add_record(session: Session, record) -> Result:
    session.add(record)
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Insert of %s failed: %s", type(record).__name__, _cause(exc))
        return Result(Outcome.error, error=_cause(exc))

    session.refresh(record)  # fills the generated id
    return Result(Outcome.ok, record)


def save_record(session: Session, model, pk, record) -> Result:
    """Commit changes already copied onto a loaded record."""
    try:
        session.commit()
    except StaleDataError:
        session.rollback()
        if not row_exists(session, model, pk):
            logger.warning("%s %s vanished before save", model.__name__, pk)
            return Result(Outcome.not_found)
        return Result(Outcome.conflict, error="El registro fue modificado por otra operación")
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Update of %s %s failed: %s", model.__name__, pk, _cause(exc))
        return Result(Outcome.error, error=_cause(exc))

    session.refresh(record)
    return Result(Outcome.ok, record)


def remove_record(session: Session, model, pk) -> Result:
    """Delete by primary key; zero matched rows means the row is gone."""
    pk_column = inspect(model).primary_key[0]
    try:
        deleted = session.execute(delete(model).where(pk_column == pk)).rowcount
        if deleted == 0:
            session.rollback()
            return Result(Outcome.not_found)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Delete of %s %s failed: %s", model.__name__, pk, _cause(exc))
        return Result(Outcome.error, error=_cause(exc))

    return Result(Outcome.ok)


def unwrap(result: Result, failure_message: str, missing_message: str):
    """Return the record of a successful result or raise the matching HTTP error."""
    if result.outcome is Outcome.ok:
        return result.record
    if result.outcome is Outcome.not_found:
        raise HTTPException(status_code=404, detail=missing_message)
    if result.outcome is Outcome.conflict:
        raise HTTPException(status_code=409, detail={"message": result.error})
    raise HTTPException(
        status_code=500,
        detail={"message": failure_message, "error": result.error},
    )
