# peluqueria/admin/api.py

import logging
from typing import Any, Optional

import requests

from peluqueria.config import settings

logger = logging.getLogger(__name__)

NETWORK_MESSAGE = (
    "No se pudo conectar con el servidor. "
    "Verifica tu conexión a internet o que la API esté disponible e intenta de nuevo."
)

# Text fragments that identify a transport failure when only the message is known
NETWORK_HINTS = (
    "failed to fetch",
    "networkerror",
    "network error",
    "connection refused",
    "connection aborted",
    "connection reset",
    "max retries exceeded",
    "name or service not known",
    "timed out",
)


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(ApiError):
    pass


def is_network_error(exc: BaseException) -> bool:
    if isinstance(exc, (NetworkError, requests.ConnectionError, requests.Timeout)):
        return True
    text = str(exc).lower()
    return any(hint in text for hint in NETWORK_HINTS)


def error_message(response, default: str) -> str:
    """Server 'message', else 'error', else the raw body, else the default."""
    text = response.text or ""
    if not text:
        return default
    try:
        body = response.json()
    except ValueError:
        return text
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or text
    return text


class ApiClient:
    """Thin JSON client for the salon API.

    ``session`` only needs a requests-style ``request(method, url, json=..., timeout=...)``,
    which lets tests hand in FastAPI's TestClient.
    """

    def __init__(self, base_url: Optional[str] = None, session=None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout or settings.request_timeout

    def _url(self, *parts) -> str:
        return "/".join([self.base_url, *(str(p) for p in parts)])

    def _request(self, method: str, url: str, payload: Any = None, default_error: str = "Error en la solicitud"):
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            if is_network_error(exc):
                raise NetworkError(NETWORK_MESSAGE) from exc
            raise ApiError(f"{default_error}: {exc}") from exc

        if response.status_code >= 400:
            message = error_message(response, default_error)
            logger.error("%s %s -> %s %s", method, url, response.status_code, message)
            raise ApiError(message, response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def list(self, entity: str):
        return self._request("GET", self._url(entity), default_error=f"Error al cargar {entity}")

    def get(self, entity: str, id: int):
        return self._request("GET", self._url(entity, id), default_error=f"Error al cargar {entity}")

    def create(self, entity: str, payload: dict):
        return self._request("POST", self._url(entity), payload, default_error=f"Error al guardar en {entity}")

    def update(self, entity: str, id: int, payload: dict):
        return self._request("PUT", self._url(entity, id), payload, default_error=f"Error al guardar en {entity}")

    def delete(self, entity: str, id: int):
        return self._request("DELETE", self._url(entity, id), default_error=f"Error al eliminar en {entity}")

    def login(self, correo: str, contrasena: str) -> dict:
        return self._request(
            "POST",
            self._url("auth", "login"),
            {"correo": correo, "contrasena": contrasena},
            default_error="Error al iniciar sesión",
        )
