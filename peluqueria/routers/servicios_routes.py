# peluqueria/routers/servicios_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session, select

from peluqueria.db import get_session
from peluqueria.deps import not_found, require_matching_id, require_positive, require_text
from peluqueria.models import Servicio
from peluqueria.persistence import add_record, remove_record, save_record, unwrap
from peluqueria.schemas import ServicioIn, ServicioPublic

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/servicios",
    tags=["servicios"],
)


def _validate(servicio: ServicioIn) -> dict:
    return {
        "nombre_servicio": require_text(servicio.nombre_servicio, "El nombre del servicio es requerido"),
        "descripcion": servicio.descripcion.strip() if servicio.descripcion else None,
        "precio": require_positive(servicio.precio, "El precio debe ser mayor a 0"),
        "duracion_minutos": require_positive(
            servicio.duracion_minutos, "La duración debe ser mayor a 0 minutos"
        ),
    }


@router.get("", response_model=List[ServicioPublic])
def list_servicios(session: Session = Depends(get_session)):
    return session.exec(select(Servicio)).all()


@router.get("/{id}", response_model=ServicioPublic)
def get_servicio(id: int, session: Session = Depends(get_session)):
    servicio = session.get(Servicio, id)
    if servicio is None:
        not_found(f"El servicio con ID {id} no existe")
    return servicio


@router.post("", response_model=ServicioPublic, status_code=201)
def create_servicio(
    servicio: ServicioIn,
    response: Response,
    session: Session = Depends(get_session),
):
    db_servicio = Servicio(**_validate(servicio))
    created = unwrap(
        add_record(session, db_servicio),
        "Error al crear el servicio en la base de datos",
        "El servicio no existe",
    )
    logger.info("Created servicio %s", created.id_servicio)
    response.headers["Location"] = f"{router.prefix}/{created.id_servicio}"
    return created


@router.put("/{id}", response_model=ServicioPublic)
def update_servicio(id: int, servicio: ServicioIn, session: Session = Depends(get_session)):
    require_matching_id(id, servicio.id_servicio, "El ID de la URL no coincide con el ID del servicio")
    fields = _validate(servicio)

    existing = session.get(Servicio, id)
    if existing is None:
        not_found(f"El servicio con ID {id} no existe")

    for key, value in fields.items():
        setattr(existing, key, value)

    updated = unwrap(
        save_record(session, Servicio, id, existing),
        "Error al actualizar el servicio en la base de datos",
        f"El servicio con ID {id} ya no existe",
    )
    logger.info("Updated servicio %s", id)
    return updated


@router.delete("/{id}", status_code=204)
def delete_servicio(id: int, session: Session = Depends(get_session)):
    unwrap(
        remove_record(session, Servicio, id),
        "Error al eliminar el servicio de la base de datos",
        f"El servicio con ID {id} no existe",
    )
    logger.info("Deleted servicio %s", id)
    return Response(status_code=204)
