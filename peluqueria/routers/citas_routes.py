# peluqueria/routers/citas_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session, select

from peluqueria.data import DEFAULT_APPOINTMENT_STATE
from peluqueria.db import get_session
from peluqueria.deps import bad_request, not_found, require_existing, require_matching_id, require_positive
from peluqueria.models import Cita, Servicio, Usuario
from peluqueria.persistence import add_record, remove_record, save_record, unwrap
from peluqueria.schemas import CitaIn, CitaPublic
from peluqueria.timefmt import parse_timestamp, to_12h, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/citas",
    tags=["citas"],
)


def _validate(cita: CitaIn, session: Session) -> dict:
    # 1) Foreign keys: positive and pointing at existing rows
    id_cliente = require_positive(cita.id_cliente, "El ID del cliente es requerido y debe ser mayor a 0")
    id_trabajador = require_positive(
        cita.id_trabajador, "El ID del trabajador es requerido y debe ser mayor a 0"
    )
    id_servicio = require_positive(cita.id_servicio, "El ID del servicio es requerido y debe ser mayor a 0")

    require_existing(session, Usuario, id_cliente, f"El cliente con ID {id_cliente} no existe")
    require_existing(session, Usuario, id_trabajador, f"El trabajador con ID {id_trabajador} no existe")
    require_existing(session, Servicio, id_servicio, f"El servicio con ID {id_servicio} no existe")

    # 2) Date and display time
    fecha_cita = parse_timestamp(cita.fecha_cita)
    if fecha_cita is None:
        bad_request("La fecha de la cita es requerida y debe ser válida")

    if not cita.hora_cita or not cita.hora_cita.strip():
        bad_request("La hora de la cita es requerida")
    try:
        hora_cita = to_12h(cita.hora_cita)
    except ValueError:
        bad_request("La hora de la cita no es válida")

    estado = (cita.estado or "").strip() or DEFAULT_APPOINTMENT_STATE

    return {
        "id_cliente": id_cliente,
        "id_trabajador": id_trabajador,
        "id_servicio": id_servicio,
        "fecha_cita": fecha_cita,
        "hora_cita": hora_cita,
        "estado": estado,
        "observaciones": cita.observaciones or None,
    }


@router.get("", response_model=List[CitaPublic])
def list_citas(session: Session = Depends(get_session)):
    return session.exec(select(Cita)).all()


@router.get("/{id}", response_model=CitaPublic)
def get_cita(id: int, session: Session = Depends(get_session)):
    cita = session.get(Cita, id)
    if cita is None:
        not_found(f"La cita con ID {id} no existe")
    return cita


@router.post("", response_model=CitaPublic, status_code=201)
def create_cita(
    cita: CitaIn,
    response: Response,
    session: Session = Depends(get_session),
):
    db_cita = Cita(
        **_validate(cita, session),
        fecha_creacion=parse_timestamp(cita.fecha_creacion) or utcnow(),
    )
    created = unwrap(
        add_record(session, db_cita),
        "Error al crear la cita en la base de datos",
        "La cita no existe",
    )
    logger.info("Created cita %s for %s", created.id_cita, created.fecha_cita.date())
    response.headers["Location"] = f"{router.prefix}/{created.id_cita}"
    return created


@router.put("/{id}", response_model=CitaPublic)
def update_cita(id: int, cita: CitaIn, session: Session = Depends(get_session)):
    require_matching_id(id, cita.id_cita, "El ID de la URL no coincide con el ID de la cita")
    fields = _validate(cita, session)

    existing = session.get(Cita, id)
    if existing is None:
        not_found(f"La cita con ID {id} no existe")

    # fecha_creacion is kept from the stored row
    for key, value in fields.items():
        setattr(existing, key, value)

    updated = unwrap(
        save_record(session, Cita, id, existing),
        "Error al actualizar la cita en la base de datos",
        f"La cita con ID {id} ya no existe",
    )
    logger.info("Updated cita %s", id)
    return updated


@router.delete("/{id}", status_code=204)
def delete_cita(id: int, session: Session = Depends(get_session)):
    unwrap(
        remove_record(session, Cita, id),
        "Error al eliminar la cita de la base de datos",
        f"La cita con ID {id} no existe",
    )
    logger.info("Deleted cita %s", id)
    return Response(status_code=204)
