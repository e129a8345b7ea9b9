# peluqueria/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlmodel import Session, select

from peluqueria.auth import build_admin_session, verify_password
from peluqueria.db import get_session
from peluqueria.models import Usuario
from peluqueria.schemas import AdminSession, LoginData, UserRole, UserState

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
)


@router.post("/login", response_model=AdminSession)
def login(credentials: LoginData, session: Session = Depends(get_session)):
    correo = credentials.correo.strip()
    if not correo or not credentials.contrasena:
        raise HTTPException(status_code=400, detail="Por favor, completa todos los campos")

    user = session.exec(
        select(Usuario).where(func.lower(Usuario.correo) == correo.lower())
    ).first()

    if user is None or not verify_password(credentials.contrasena, user.contrasena_hash):
        logger.warning("Failed login for %s", correo)
        raise HTTPException(status_code=401, detail="Credenciales incorrectas")

    if user.rol != UserRole.administrador.value:
        raise HTTPException(
            status_code=403,
            detail="Acceso denegado. Solo administradores pueden iniciar sesión",
        )

    if user.estado != UserState.activo.value:
        raise HTTPException(
            status_code=403,
            detail="Tu cuenta no está activa. Contacta al administrador",
        )

    logger.info("Admin %s logged in", user.id_usuario)
    return build_admin_session(user)
