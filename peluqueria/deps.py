# peluqueria/deps.py

import logging
import math
from typing import Iterable, Optional

from fastapi import HTTPException
from sqlmodel import Session

logger = logging.getLogger(__name__)


def bad_request(message: str):
    logger.warning("Rejected request: %s", message)
    raise HTTPException(status_code=400, detail=message)


def not_found(message: str):
    raise HTTPException(status_code=404, detail=message)


def require_text(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        bad_request(message)
    return value.strip()


def require_choice(value: str, choices: Iterable[str], label: str) -> str:
    choices = tuple(choices)
    normalized = value.strip().lower()
    if normalized not in choices:
        bad_request(f"{label} debe ser uno de: {', '.join(choices)}")
    return normalized


def require_positive(value, message: str):
    if value is None or not math.isfinite(value) or value <= 0:
        bad_request(message)
    return value


def require_matching_id(path_id: int, body_id: Optional[int], message: str):
    if body_id != path_id:
        bad_request(message)


def require_existing(session: Session, model, pk: int, message: str):
    """Referenced row must exist, otherwise 400 (the payload is what is wrong)."""
    record = session.get(model, pk)
    if record is None:
        bad_request(message)
    return record
