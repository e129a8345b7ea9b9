# peluqueria/admin/session.py

import json
import logging
from pathlib import Path
from typing import Optional

from peluqueria.config import settings

logger = logging.getLogger(__name__)

SESSION_FIELDS = ("id", "nombre", "correo", "telefono", "rol", "timestamp")


class NotAuthenticated(Exception):
    pass


class SessionStore:
    """The logged-in administrator record, kept in a local JSON file.

    The file existing is what grants access to the admin controller.
    """

    def __init__(self, path=None):
        self.path = Path(path or settings.admin_session_file).expanduser()

    def save(self, record: dict):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {key: record.get(key) for key in SESSION_FIELDS}
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    def load(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Discarding unreadable session file %s", self.path)
            self.clear()
            return None
        if not isinstance(data, dict):
            self.clear()
            return None
        return data

    def clear(self):
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def require(self) -> dict:
        user = self.load()
        if user is None:
            raise NotAuthenticated("Debes iniciar sesión como administrador")
        return user


def login(api, store: SessionStore, correo: str, contrasena: str) -> dict:
    correo = (correo or "").strip()
    if not correo or not contrasena:
        raise ValueError("Por favor, completa todos los campos")

    record = api.login(correo, contrasena)
    store.save(record)
    logger.info("Session stored for %s", record.get("correo"))
    return record
