# peluqueria/reports.py
"""Daily report: same-day views, aggregate figures and the two exports.

Everything here works on plain dicts shaped like the API's JSON, so the admin
client can feed it the collections it already loaded and the server can feed
it rows dumped from the database.
"""

from datetime import date, datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .data import COMPLETED_STATE, payment_label
from .timefmt import date_portion, format_display_date

CSV_SECTIONS = ("=== SERVICIOS ===", "=== CITAS DEL DÍA ===", "=== VENTAS ===")


def parse_report_date(fecha) -> str:
    """Validate a YYYY-MM-DD report date, returning it as a string."""
    if isinstance(fecha, date):
        return fecha.isoformat()
    if not fecha:
        raise ValueError("Por favor selecciona una fecha")
    try:
        return date.fromisoformat(str(fecha).strip()).isoformat()
    except ValueError:
        raise ValueError(f"Fecha de reporte inválida: {fecha}")


def citas_for_date(citas, fecha):
    return [c for c in citas if date_portion(c.get("fecha_cita")) == fecha]


def facturas_for_date(facturas, fecha):
    return [f for f in facturas if date_portion(f.get("fecha_emision")) == fecha]


def daily_stats(citas, facturas, fecha) -> dict:
    citas_fecha = citas_for_date(citas, fecha)
    facturas_fecha = facturas_for_date(facturas, fecha)
    return {
        "total_citas": len(citas_fecha),
        "citas_completadas": sum(1 for c in citas_fecha if c.get("estado") == COMPLETED_STATE),
        "facturas_generadas": len(facturas_fecha),
        "ventas_totales": round(sum(float(f.get("total") or 0) for f in facturas_fecha), 2),
    }


def format_money(value) -> str:
    return f"${float(value or 0):.2f}"


def _plain(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def format_csv_value(value) -> str:
    """Quote values holding a comma, line break or quote; inner quotes are doubled."""
    text = _plain(value)
    if any(ch in text for ch in ',\n\r"'):
        return '"' + text.replace('"', '""') + '"'
    return text


def csv_row(values) -> str:
    return ",".join(format_csv_value(v) for v in values) + "\n"


def csv_filename(fecha) -> str:
    return f"reporte_{fecha}.csv"


def build_csv(fecha, servicios, citas, facturas, cache) -> str:
    lines = [f"Reporte Diario - {fecha}\n", "\n"]

    lines.append(CSV_SECTIONS[0] + "\n")
    lines.append("ID,Nombre,Descripción,Precio,Duración (min)\n")
    for servicio in servicios:
        lines.append(csv_row([
            servicio.get("id_servicio"),
            servicio.get("nombre_servicio"),
            servicio.get("descripcion") or "",
            servicio.get("precio"),
            servicio.get("duracion_minutos"),
        ]))

    lines.append("\n" + CSV_SECTIONS[1] + "\n")
    lines.append("ID,Cliente,Trabajador,Servicio,Hora,Estado\n")
    for cita in citas_for_date(citas, fecha):
        lines.append(csv_row([
            cita.get("id_cita"),
            cache.user_label(cita.get("id_cliente")),
            cache.user_label(cita.get("id_trabajador")),
            cache.service_label(cita.get("id_servicio")),
            cita.get("hora_cita") or "",
            cita.get("estado") or "",
        ]))

    lines.append("\n" + CSV_SECTIONS[2] + "\n")
    lines.append("ID Factura,ID Cita,Cliente,Total,Método Pago,Fecha\n")
    for factura in facturas_for_date(facturas, fecha):
        cita = cache.cita(factura.get("id_cita"))
        lines.append(csv_row([
            factura.get("id_factura"),
            factura.get("id_cita"),
            cache.user_label(cita.get("id_cliente")) if cita else "",
            factura.get("total"),
            payment_label(factura.get("metodo_pago")),
            factura.get("fecha_emision"),
        ]))

    return "".join(lines)


templates = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "templates"),
    autoescape=select_autoescape(["html"]),
)


def services_rows(servicios):
    return [
        [
            s.get("id_servicio"),
            s.get("nombre_servicio"),
            s.get("descripcion") or "",
            format_money(s.get("precio")),
            f"{s.get('duracion_minutos')} min",
        ]
        for s in servicios
    ]


def citas_rows(citas, fecha, cache):
    return [
        [
            c.get("id_cita"),
            cache.user_label(c.get("id_cliente")),
            cache.user_label(c.get("id_trabajador")),
            cache.service_label(c.get("id_servicio")),
            c.get("hora_cita") or "-",
            c.get("estado") or "-",
        ]
        for c in citas_for_date(citas, fecha)
    ]


def sales_rows(facturas, fecha, cache):
    rows = []
    for f in facturas_for_date(facturas, fecha):
        cita = cache.cita(f.get("id_cita"))
        rows.append([
            f.get("id_factura"),
            cache.cita_label(cita) if cita else f"Cita #{f.get('id_cita')}",
            cache.user_label(cita.get("id_cliente")) if cita else "-",
            format_money(f.get("total")),
            payment_label(f.get("metodo_pago")),
            format_display_date(f.get("fecha_emision")),
        ])
    return rows


def build_html(fecha, servicios, citas, facturas, cache, generated_at=None) -> str:
    """Printable report; the page asks the browser to print as soon as it loads."""
    stats = daily_stats(citas, facturas, fecha)
    generated_at = generated_at or datetime.now()
    return templates.get_template("reporte_diario.html").render(
        fecha=fecha,
        generado=generated_at.strftime("%d/%m/%Y, %H:%M:%S"),
        stats=[
            (stats["total_citas"], "Citas del Día"),
            (stats["citas_completadas"], "Citas Completadas"),
            (format_money(stats["ventas_totales"]), "Ventas Totales"),
            (stats["facturas_generadas"], "Facturas Generadas"),
        ],
        servicios=services_rows(servicios),
        citas=citas_rows(citas, fecha, cache),
        ventas=sales_rows(facturas, fecha, cache),
    )
