# peluqueria/auth.py

from datetime import datetime, timezone

from passlib.context import CryptContext

from .models import Usuario

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if not plain or not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def build_admin_session(user: Usuario) -> dict:
    """Record the admin client keeps locally after a successful login."""
    return {
        "id": user.id_usuario,
        "nombre": user.nombre,
        "correo": user.correo,
        "telefono": user.telefono,
        "rol": user.rol,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
