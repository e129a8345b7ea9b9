# peluqueria/routers/usuarios_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy import func
from sqlmodel import Session, select

from peluqueria.auth import hash_password
from peluqueria.db import get_session
from peluqueria.deps import bad_request, not_found, require_choice, require_matching_id, require_text
from peluqueria.models import Usuario
from peluqueria.persistence import add_record, remove_record, save_record, unwrap
from peluqueria.schemas import UserRole, UserState, UsuarioIn, UsuarioPublic
from peluqueria.timefmt import parse_timestamp, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/usuarios",
    tags=["usuarios"],
)

ROLES = [r.value for r in UserRole]
STATES = [s.value for s in UserState]


def _validate(usuario: UsuarioIn) -> dict:
    fields = {
        "nombre": require_text(usuario.nombre, "El nombre es requerido"),
        "correo": require_text(usuario.correo, "El correo electrónico es requerido"),
    }
    rol = require_text(usuario.rol, "El rol es requerido")
    estado = require_text(usuario.estado, "El estado es requerido")
    fields["rol"] = require_choice(rol, ROLES, "El rol")
    fields["estado"] = require_choice(estado, STATES, "El estado")
    fields["telefono"] = usuario.telefono.strip() if usuario.telefono else None
    return fields


def _ensure_unique_email(session: Session, correo: str, exclude_id=None):
    existing = session.exec(
        select(Usuario).where(func.lower(Usuario.correo) == correo.lower())
    ).first()
    if existing is not None and existing.id_usuario != exclude_id:
        bad_request("Ya existe un usuario con ese correo electrónico")


@router.get("", response_model=List[UsuarioPublic])
def list_usuarios(session: Session = Depends(get_session)):
    return session.exec(select(Usuario)).all()


@router.get("/{id}", response_model=UsuarioPublic)
def get_usuario(id: int, session: Session = Depends(get_session)):
    usuario = session.get(Usuario, id)
    if usuario is None:
        not_found(f"El usuario con ID {id} no existe")
    return usuario


@router.post("", response_model=UsuarioPublic, status_code=201)
def create_usuario(
    usuario: UsuarioIn,
    response: Response,
    session: Session = Depends(get_session),
):
    fields = _validate(usuario)
    contrasena = require_text(usuario.contrasena, "La contraseña es requerida para nuevos usuarios")
    _ensure_unique_email(session, fields["correo"])

    db_usuario = Usuario(
        **fields,
        contrasena_hash=hash_password(contrasena),
        fecha_registro=parse_timestamp(usuario.fecha_registro) or utcnow(),
    )
    created = unwrap(
        add_record(session, db_usuario),
        "Error al crear el usuario en la base de datos",
        "El usuario no existe",
    )
    logger.info("Created usuario %s (%s)", created.id_usuario, created.rol)
    response.headers["Location"] = f"{router.prefix}/{created.id_usuario}"
    return created


@router.put("/{id}", response_model=UsuarioPublic)
def update_usuario(id: int, usuario: UsuarioIn, session: Session = Depends(get_session)):
    require_matching_id(id, usuario.id_usuario, "El ID de la URL no coincide con el ID del usuario")
    fields = _validate(usuario)

    existing = session.get(Usuario, id)
    if existing is None:
        not_found(f"El usuario con ID {id} no existe")
    _ensure_unique_email(session, fields["correo"], exclude_id=id)

    for key, value in fields.items():
        setattr(existing, key, value)
    # Password only changes when a new one is sent; fecha_registro never changes
    if usuario.contrasena and usuario.contrasena.strip():
        existing.contrasena_hash = hash_password(usuario.contrasena)

    updated = unwrap(
        save_record(session, Usuario, id, existing),
        "Error al actualizar el usuario en la base de datos",
        f"El usuario con ID {id} ya no existe",
    )
    logger.info("Updated usuario %s", id)
    return updated


@router.delete("/{id}", status_code=204)
def delete_usuario(id: int, session: Session = Depends(get_session)):
    unwrap(
        remove_record(session, Usuario, id),
        "Error al eliminar el usuario de la base de datos",
        f"El usuario con ID {id} no existe",
    )
    logger.info("Deleted usuario %s", id)
    return Response(status_code=204)
