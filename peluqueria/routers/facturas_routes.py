# peluqueria/routers/facturas_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session, select

from peluqueria.data import PAYMENT_METHODS
from peluqueria.db import get_session
from peluqueria.deps import (
    bad_request,
    not_found,
    require_existing,
    require_matching_id,
    require_positive,
    require_text,
)
from peluqueria.models import Cita, Factura
from peluqueria.persistence import add_record, remove_record, save_record, unwrap
from peluqueria.schemas import FacturaIn, FacturaPublic
from peluqueria.timefmt import parse_timestamp, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/facturas",
    tags=["facturas"],
)


def _validate(factura: FacturaIn, session: Session) -> dict:
    id_cita = require_positive(factura.id_cita, "El ID de la cita es requerido y debe ser mayor a 0")
    total = require_positive(factura.total, "El total debe ser mayor a 0")
    metodo_pago = require_text(factura.metodo_pago, "El método de pago es requerido").lower()
    if metodo_pago not in PAYMENT_METHODS:
        bad_request(f"El método de pago debe ser uno de: {', '.join(PAYMENT_METHODS)}")

    require_existing(session, Cita, id_cita, f"La cita con ID {id_cita} no existe")

    return {"id_cita": id_cita, "total": total, "metodo_pago": metodo_pago}


@router.get("", response_model=List[FacturaPublic])
def list_facturas(session: Session = Depends(get_session)):
    return session.exec(select(Factura)).all()


@router.get("/{id}", response_model=FacturaPublic)
def get_factura(id: int, session: Session = Depends(get_session)):
    factura = session.get(Factura, id)
    if factura is None:
        not_found(f"La factura con ID {id} no existe")
    return factura


@router.post("", response_model=FacturaPublic, status_code=201)
def create_factura(
    factura: FacturaIn,
    response: Response,
    session: Session = Depends(get_session),
):
    fields = _validate(factura, session)
    # Missing or unreadable issue date means "now"
    fields["fecha_emision"] = parse_timestamp(factura.fecha_emision) or utcnow()

    created = unwrap(
        add_record(session, Factura(**fields)),
        "Error al guardar la factura en la base de datos",
        "La factura no existe",
    )
    logger.info("Created factura %s for cita %s", created.id_factura, created.id_cita)
    response.headers["Location"] = f"{router.prefix}/{created.id_factura}"
    return created


@router.put("/{id}", response_model=FacturaPublic)
def update_factura(id: int, factura: FacturaIn, session: Session = Depends(get_session)):
    require_matching_id(id, factura.id_factura, "El ID de la URL no coincide con el ID de la factura")
    fields = _validate(factura, session)

    fecha_emision = parse_timestamp(factura.fecha_emision)
    if fecha_emision is None:
        bad_request("La fecha de emisión es requerida y debe ser válida")
    fields["fecha_emision"] = fecha_emision

    existing = session.get(Factura, id)
    if existing is None:
        not_found(f"La factura con ID {id} no existe")

    for key, value in fields.items():
        setattr(existing, key, value)

    updated = unwrap(
        save_record(session, Factura, id, existing),
        "Error al actualizar la factura en la base de datos",
        f"La factura con ID {id} ya no existe",
    )
    logger.info("Updated factura %s", id)
    return updated


@router.delete("/{id}", status_code=204)
def delete_factura(id: int, session: Session = Depends(get_session)):
    unwrap(
        remove_record(session, Factura, id),
        "Error al eliminar la factura de la base de datos",
        f"La factura con ID {id} no existe",
    )
    logger.info("Deleted factura %s", id)
    return Response(status_code=204)
