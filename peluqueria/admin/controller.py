# peluqueria/admin/controller.py
"""Admin dashboard logic without the markup.

Each editable entity has a form workflow

    idle -> creating | editing(id) -> submitting -> idle

and a delete workflow gated by an explicit confirmation

    idle -> confirming(id) -> deleting(id) -> idle

``AdminController`` ties the workflows to the loaded ``AppState``, the
logged-in session, tab switching and the daily report exports.
"""

import logging
import math
import webbrowser
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from peluqueria import reports
from peluqueria.config import settings
from peluqueria.data import APPOINTMENT_STATES, PAYMENT_METHODS
from peluqueria.timefmt import parse_timestamp, to_12h, to_24h

from .api import NETWORK_MESSAGE, ApiClient, ApiError, NetworkError
from .cache import sort_key
from .session import SessionStore
from .state import AppState, cita_rows, factura_rows, servicio_rows, user_options

logger = logging.getLogger(__name__)


class FormMode(str, Enum):
    idle = "idle"
    creating = "creating"
    editing = "editing"
    submitting = "submitting"


class DeleteMode(str, Enum):
    idle = "idle"
    confirming = "confirming"
    deleting = "deleting"


@dataclass
class SelectField:
    placeholder: str
    options: List[dict] = field(default_factory=list)
    disabled: bool = False

    def values(self):
        return [str(o["value"]) for o in self.options]


def _positive_int(value) -> Optional[int]:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _log_notify(message: str, kind: str = "success"):
    if kind == "error":
        logger.error(message)
    else:
        logger.info(message)


class EntityWorkflow:
    entity = ""
    label = ""

    def __init__(self, api: ApiClient, state: AppState, notify: Optional[Callable] = None):
        self.api = api
        self.state = state
        self.notify = notify or _log_notify
        self.mode = FormMode.idle
        self.editing_id = None
        self.form = None
        self.error = None
        self.delete_mode = DeleteMode.idle
        self.deleting_id = None

    @property
    def is_open(self) -> bool:
        return self.mode is not FormMode.idle

    def reload(self):
        raise NotImplementedError

    def _reload_quietly(self):
        try:
            self.reload()
        except ApiError as exc:
            self.notify(f"Error al cargar las {self.entity}: {exc.message}", "error")

    def close_form(self):
        self.mode = FormMode.idle
        self.editing_id = None
        self.form = None
        self.error = None

    def _fail(self, message: str) -> bool:
        self.error = message
        self.notify(message, "error")
        return False

    def _require_open_form(self):
        if self.mode not in (FormMode.creating, FormMode.editing):
            raise RuntimeError("No hay un formulario abierto")

    def _save(self, payload: dict) -> bool:
        previous = self.mode
        self.mode = FormMode.submitting
        try:
            if self.editing_id is not None:
                self.api.update(self.entity, self.editing_id, payload)
            else:
                self.api.create(self.entity, payload)
        except ApiError as exc:
            # back to the form so the user can correct and retry
            self.mode = previous
            return self._fail(NETWORK_MESSAGE if isinstance(exc, NetworkError) else exc.message)

        done = "actualizada" if self.editing_id is not None else "creada"
        self.notify(f"{self.label} {done} exitosamente")
        self.close_form()
        self._reload_quietly()
        return True

    def request_delete(self, id):
        self.deleting_id = id
        self.delete_mode = DeleteMode.confirming

    def cancel_delete(self):
        self.deleting_id = None
        self.delete_mode = DeleteMode.idle

    def confirm_delete(self) -> bool:
        if self.delete_mode is not DeleteMode.confirming or self.deleting_id is None:
            return False

        self.delete_mode = DeleteMode.deleting
        try:
            self.api.delete(self.entity, self.deleting_id)
        except ApiError as exc:
            message = NETWORK_MESSAGE if isinstance(exc, NetworkError) else (
                f"Error al eliminar la {self.label.lower()}. Por favor intenta de nuevo."
            )
            self.notify(message, "error")
            return False
        finally:
            self.deleting_id = None
            self.delete_mode = DeleteMode.idle

        self.notify(f"{self.label} eliminada exitosamente")
        self._reload_quietly()
        return True


class CitaWorkflow(EntityWorkflow):
    entity = "citas"
    label = "Cita"

    def reload(self):
        return self.state.reload_citas(self.api)

    def client_field(self) -> SelectField:
        if not self.state.clientes:
            return SelectField("No hay clientes disponibles", disabled=True)
        return SelectField("Seleccione un cliente...", user_options(self.state.clientes))

    def worker_field(self) -> SelectField:
        if not self.state.trabajadores:
            return SelectField("No hay trabajadores disponibles", disabled=True)
        return SelectField("Seleccione un trabajador...", user_options(self.state.trabajadores))

    def service_field(self) -> SelectField:
        if not self.state.servicios:
            return SelectField("No hay servicios disponibles", disabled=True)
        servicios = sorted(self.state.servicios, key=lambda s: sort_key(str(s.get("nombre_servicio") or "")))
        return SelectField(
            "Seleccione un servicio...",
            [
                {
                    "value": s.get("id_servicio"),
                    "label": s.get("nombre_servicio") or f"Servicio #{s.get('id_servicio')}",
                }
                for s in servicios
            ],
        )

    @staticmethod
    def form_values(cita) -> dict:
        if cita is None:
            return {
                "id_cliente": "", "id_trabajador": "", "id_servicio": "",
                "fecha_cita": "", "hora_cita": "", "estado": "", "observaciones": "",
            }
        fecha = parse_timestamp(cita.get("fecha_cita"))
        hora = cita.get("hora_cita") or ""
        try:
            hora = to_24h(hora)
        except ValueError:
            pass
        return {
            "id_cita": cita.get("id_cita"),
            "id_cliente": str(cita.get("id_cliente")),
            "id_trabajador": str(cita.get("id_trabajador")),
            "id_servicio": str(cita.get("id_servicio")),
            "fecha_cita": fecha.date().isoformat() if fecha else "",
            "hora_cita": hora,
            "estado": cita.get("estado") or "",
            "observaciones": cita.get("observaciones") or "",
        }

    def open_form(self, cita_id=None):
        cita = None
        if cita_id is not None:
            cita = self.state.find_cita(cita_id)
            if cita is None:
                return None

        self.editing_id = cita_id
        self.mode = FormMode.editing if cita else FormMode.creating
        self.error = None
        self.form = {
            "titulo": "Editar Cita" if cita else "Nueva Cita",
            "clientes": self.client_field(),
            "trabajadores": self.worker_field(),
            "servicios": self.service_field(),
            "estados": list(APPOINTMENT_STATES),
            "fecha_minima": date.today().isoformat(),
            "values": self.form_values(cita),
        }
        return self.form

    def submit(self, values: dict) -> bool:
        self._require_open_form()

        id_cliente = _positive_int(values.get("id_cliente"))
        if id_cliente is None:
            return self._fail("Por favor selecciona un cliente válido")
        id_trabajador = _positive_int(values.get("id_trabajador"))
        if id_trabajador is None:
            return self._fail("Por favor selecciona un trabajador válido")
        id_servicio = _positive_int(values.get("id_servicio"))
        if id_servicio is None:
            return self._fail("Por favor selecciona un servicio válido")

        fecha = str(values.get("fecha_cita") or "").strip()
        if not fecha:
            return self._fail("Por favor selecciona una fecha para la cita")
        hora = str(values.get("hora_cita") or "").strip()
        if not hora:
            return self._fail("Por favor selecciona una hora para la cita")
        estado = str(values.get("estado") or "").strip()
        if not estado:
            return self._fail("Por favor selecciona un estado para la cita")

        try:
            hora_24 = to_24h(hora)
            fecha_hora = datetime.fromisoformat(f"{fecha}T{hora_24}:00")
        except ValueError:
            return self._fail("Fecha u hora de la cita inválida")

        payload = {
            "id_cita": self.editing_id or 0,
            "id_cliente": id_cliente,
            "id_trabajador": id_trabajador,
            "id_servicio": id_servicio,
            "fecha_cita": fecha_hora.isoformat(),
            "hora_cita": to_12h(hora_24),
            "estado": estado,
            "observaciones": values.get("observaciones") or "",
        }
        if self.editing_id is not None:
            existing = self.state.find_cita(self.editing_id)
            if existing and existing.get("fecha_creacion"):
                payload["fecha_creacion"] = existing["fecha_creacion"]

        return self._save(payload)


class FacturaWorkflow(EntityWorkflow):
    entity = "facturas"
    label = "Factura"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.filter_cliente = ""

    def reload(self):
        return self.state.reload_facturas(self.api)

    def client_filter_field(self) -> SelectField:
        return SelectField(
            "Ver todos los clientes",
            user_options(self.state.clientes),
            disabled=not self.state.clientes,
        )

    def cita_field(self, filter_cliente="") -> SelectField:
        wanted = str(filter_cliente or "")
        options = [
            {"value": c.get("id_cita"), "label": self.state.cache.cita_label(c)}
            for c in self.state.citas
            if not wanted or str(c.get("id_cliente")) == wanted
        ]
        return SelectField("Seleccione una cita...", options, disabled=not options)

    def filter_by_cliente(self, cliente_id=""):
        self.filter_cliente = str(cliente_id or "")
        if self.form is not None:
            self.form["filtro_cliente"] = self.filter_cliente
            self.form["citas"] = self.cita_field(self.filter_cliente)

    def open_form(self, factura_id=None, filter_cliente=None):
        factura = None
        filter_value = str(filter_cliente if filter_cliente is not None else self.filter_cliente)
        if factura_id is not None:
            factura = self.state.find_factura(factura_id)
            if factura is None:
                return None
            cita = self.state.cache.cita(factura.get("id_cita"))
            if cita:
                filter_value = str(cita.get("id_cliente") or "")

        citas_field = self.cita_field(filter_value)
        if factura:
            fecha = parse_timestamp(factura.get("fecha_emision"))
            values = {
                "id_factura": factura.get("id_factura"),
                "id_cita": str(factura.get("id_cita")),
                "total": factura.get("total"),
                "metodo_pago": factura.get("metodo_pago") or "",
                "fecha_emision": fecha.date().isoformat() if fecha else "",
            }
            # the invoice's appointment must be selectable even if the filter hides it
            if values["id_cita"] not in citas_field.values():
                citas_field = self.cita_field("")
        else:
            values = {
                "id_cita": "",
                "total": "",
                "metodo_pago": "",
                "fecha_emision": date.today().isoformat(),
            }

        self.filter_cliente = filter_value
        self.editing_id = factura_id if factura else None
        self.mode = FormMode.editing if factura else FormMode.creating
        self.error = None
        self.form = {
            "titulo": "Editar Factura" if factura else "Nueva Factura",
            "clientes": self.client_filter_field(),
            "filtro_cliente": filter_value,
            "citas": citas_field,
            "metodos_pago": [{"value": k, "label": v} for k, v in PAYMENT_METHODS.items()],
            "values": values,
        }
        return self.form

    def submit(self, values: dict) -> bool:
        self._require_open_form()

        id_cita = _positive_int(values.get("id_cita"))
        if id_cita is None:
            return self._fail("Por favor selecciona una cita válida")

        try:
            total = float(values.get("total"))
        except (TypeError, ValueError):
            total = None
        if total is None or math.isnan(total) or total <= 0:
            return self._fail("El total debe ser mayor a 0")

        metodo_pago = str(values.get("metodo_pago") or "").strip()
        if metodo_pago not in PAYMENT_METHODS:
            return self._fail("Por favor selecciona un método de pago")

        fecha_emision = str(values.get("fecha_emision") or "").strip()
        if fecha_emision and parse_timestamp(fecha_emision) is None:
            return self._fail("La fecha de emisión no es válida")
        if not fecha_emision and self.editing_id is not None:
            return self._fail("La fecha de emisión es requerida")

        payload = {
            "id_factura": self.editing_id or 0,
            "id_cita": id_cita,
            "total": total,
            "metodo_pago": metodo_pago,
            "fecha_emision": fecha_emision or None,
        }
        return self._save(payload)


class AdminController:
    TABS = ("citas", "facturas", "reportes")

    def __init__(self, api: Optional[ApiClient] = None, store: Optional[SessionStore] = None,
                 notify: Optional[Callable] = None):
        self.store = store or SessionStore()
        # no session, no dashboard
        self.user = self.store.require()
        self.api = api or ApiClient()
        self.notify = notify or _log_notify
        self.state = AppState()
        self.citas = CitaWorkflow(self.api, self.state, self.notify)
        self.facturas = FacturaWorkflow(self.api, self.state, self.notify)
        self.current_tab = "citas"
        self.report_date = date.today().isoformat()

    @property
    def greeting(self) -> str:
        return f"Hola, {self.user.get('nombre') or 'Administrador'}"

    def load_all(self):
        """Load every collection; one failing does not stop the others."""
        loaders = (
            ("usuarios", self.state.reload_usuarios),
            ("servicios", self.state.reload_servicios),
            ("citas", self.state.reload_citas),
            ("facturas", self.state.reload_facturas),
        )
        ok = True
        for name, loader in loaders:
            try:
                loader(self.api)
            except ApiError as exc:
                ok = False
                message = NETWORK_MESSAGE if isinstance(exc, NetworkError) else f"Error al cargar los {name}"
                self.notify(message, "error")
        return ok

    def switch_tab(self, name: str):
        if name not in self.TABS:
            raise ValueError(f"Pestaña desconocida: {name}")
        self.current_tab = name
        return name

    def logout(self):
        self.store.clear()
        logger.info("Admin %s logged out", self.user.get("id"))

    def cita_rows(self):
        return cita_rows(self.state)

    def factura_rows(self):
        return factura_rows(self.state)

    def servicio_rows(self):
        return servicio_rows(self.state)

    def generate_report(self, fecha=None) -> dict:
        fecha = reports.parse_report_date(fecha or self.report_date)
        self.report_date = fecha
        cache = self.state.cache
        citas = reports.citas_for_date(self.state.citas, fecha)
        facturas = reports.facturas_for_date(self.state.facturas, fecha)
        return {
            "fecha": fecha,
            "stats": reports.daily_stats(self.state.citas, self.state.facturas, fecha),
            "citas": [
                {
                    "id": c.get("id_cita"),
                    "cliente": cache.user_label(c.get("id_cliente")),
                    "trabajador": cache.user_label(c.get("id_trabajador")),
                    "servicio": cache.service_label(c.get("id_servicio")),
                    "hora": c.get("hora_cita") or "-",
                    "estado": c.get("estado") or "-",
                }
                for c in citas
            ],
            "ventas": [
                {
                    "id": f.get("id_factura"),
                    "cita": cache.cita_label(cache.cita(f.get("id_cita"))) or f"Cita #{f.get('id_cita')}",
                    "total": reports.format_money(f.get("total")),
                    "metodo_pago": f.get("metodo_pago"),
                }
                for f in facturas
            ],
        }

    def _report_dir(self, directory) -> Path:
        path = Path(directory or settings.report_dir or ".").expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def export_csv(self, fecha=None, directory=None) -> Path:
        fecha = reports.parse_report_date(fecha or self.report_date)
        content = reports.build_csv(fecha, self.state.servicios, self.state.citas,
                                    self.state.facturas, self.state.cache)
        path = self._report_dir(directory) / reports.csv_filename(fecha)
        path.write_text(content, encoding="utf-8")
        self.notify("Reporte CSV exportado exitosamente")
        return path

    def export_html(self, fecha=None, directory=None, open_browser=False) -> Path:
        fecha = reports.parse_report_date(fecha or self.report_date)
        content = reports.build_html(fecha, self.state.servicios, self.state.citas,
                                     self.state.facturas, self.state.cache)
        path = self._report_dir(directory) / f"reporte_{fecha}.html"
        path.write_text(content, encoding="utf-8")
        if open_browser:
            webbrowser.open_new_tab(path.resolve().as_uri())
        self.notify("Reporte PDF preparado para imprimir")
        return path
