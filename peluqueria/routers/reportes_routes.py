# peluqueria/routers/reportes_routes.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, Response
from sqlmodel import Session, select

from peluqueria import reports
from peluqueria.admin.cache import ReferenceCache
from peluqueria.db import get_session
from peluqueria.models import Cita, Factura, Servicio, Usuario
from peluqueria.schemas import CitaPublic, DailyReport, FacturaPublic, ServicioPublic, UsuarioPublic

router = APIRouter(
    prefix="/api/reportes",
    tags=["reportes"],
)


def _dump(schema, rows):
    return [schema.model_validate(row, from_attributes=True).model_dump(mode="json") for row in rows]


def _load(session: Session, fecha):
    try:
        fecha = reports.parse_report_date(fecha)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    usuarios = _dump(UsuarioPublic, session.exec(select(Usuario)).all())
    servicios = _dump(ServicioPublic, session.exec(select(Servicio)).all())
    citas = _dump(CitaPublic, session.exec(select(Cita)).all())
    facturas = _dump(FacturaPublic, session.exec(select(Factura)).all())
    cache = ReferenceCache.from_collections(usuarios, servicios, citas)
    return fecha, servicios, citas, facturas, cache


@router.get("/diario", response_model=DailyReport)
def daily_report(fecha: str = "", session: Session = Depends(get_session)):
    fecha, servicios, citas, facturas, _ = _load(session, fecha)
    return {
        "fecha": fecha,
        "stats": reports.daily_stats(citas, facturas, fecha),
        "servicios": servicios,
        "citas": reports.citas_for_date(citas, fecha),
        "facturas": reports.facturas_for_date(facturas, fecha),
    }


@router.get("/diario/csv")
def daily_report_csv(fecha: str = "", session: Session = Depends(get_session)):
    fecha, servicios, citas, facturas, cache = _load(session, fecha)
    content = reports.build_csv(fecha, servicios, citas, facturas, cache)
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{reports.csv_filename(fecha)}"'},
    )


@router.get("/diario/html", response_class=HTMLResponse)
def daily_report_html(fecha: str = "", session: Session = Depends(get_session)):
    fecha, servicios, citas, facturas, cache = _load(session, fecha)
    return HTMLResponse(reports.build_html(fecha, servicios, citas, facturas, cache))
