# peluqueria/admin/state.py

from peluqueria.data import payment_label
from peluqueria.reports import format_money
from peluqueria.timefmt import format_display_date

from .cache import ReferenceCache, user_display_name


class AppState:
    """Collections currently loaded in the admin client.

    Each collection is replaced only through its reload method, which swaps
    the list and the matching lookup map together.
    """

    def __init__(self):
        self.usuarios = []
        self.servicios = []
        self.citas = []
        self.facturas = []
        self.cache = ReferenceCache()

    @property
    def clientes(self):
        return self.cache.clientes

    @property
    def trabajadores(self):
        return self.cache.trabajadores

    def reload_usuarios(self, api):
        usuarios = api.list("usuarios") or []
        self.cache.rebuild_usuarios(usuarios)
        self.usuarios = usuarios
        return usuarios

    def reload_servicios(self, api):
        servicios = api.list("servicios") or []
        self.cache.rebuild_servicios(servicios)
        self.servicios = servicios
        return servicios

    def reload_citas(self, api):
        citas = api.list("citas") or []
        self.cache.rebuild_citas(citas)
        self.citas = citas
        return citas

    def reload_facturas(self, api):
        facturas = api.list("facturas") or []
        self.facturas = facturas
        return facturas

    def find_cita(self, id):
        return next((c for c in self.citas if c.get("id_cita") == id), None)

    def find_factura(self, id):
        return next((f for f in self.facturas if f.get("id_factura") == id), None)


def estado_class(estado) -> str:
    if not estado:
        return "pendiente"
    return estado.lower().replace(" ", "_")


def cita_rows(state: AppState):
    cache = state.cache
    return [
        {
            "id": cita.get("id_cita"),
            "cliente": cache.user_label(cita.get("id_cliente")),
            "trabajador": cache.user_label(cita.get("id_trabajador")),
            "servicio": cache.service_label(cita.get("id_servicio")),
            "fecha": format_display_date(cita.get("fecha_cita")),
            "hora": cita.get("hora_cita") or "-",
            "estado": cita.get("estado") or "-",
            "estado_class": estado_class(cita.get("estado")),
        }
        for cita in state.citas
    ]


def factura_rows(state: AppState):
    cache = state.cache
    rows = []
    for factura in state.facturas:
        cita = cache.cita(factura.get("id_cita"))
        rows.append({
            "id": factura.get("id_factura"),
            "cita": cache.cita_label(cita) if cita else f"Cita #{factura.get('id_cita')}",
            "cliente": cache.user_label(cita.get("id_cliente")) if cita else "-",
            "total": format_money(factura.get("total")),
            "metodo_pago": payment_label(factura.get("metodo_pago")),
            "fecha": format_display_date(factura.get("fecha_emision")),
        })
    return rows


def servicio_rows(state: AppState):
    return [
        {
            "id": s.get("id_servicio"),
            "nombre": s.get("nombre_servicio"),
            "descripcion": s.get("descripcion") or "-",
            "precio": format_money(s.get("precio")),
            "duracion": f"{s.get('duracion_minutos')} min",
        }
        for s in state.servicios
    ]


def user_options(usuarios):
    return [{"value": u.get("id_usuario"), "label": user_display_name(u)} for u in usuarios]
