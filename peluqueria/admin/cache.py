# peluqueria/admin/cache.py

import unicodedata

from peluqueria.timefmt import parse_timestamp


def _key(value):
    return None if value is None else str(value)


def sort_key(text: str) -> str:
    """Accent and case insensitive ordering, like localeCompare(..., {sensitivity: 'base'})."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def user_display_name(usuario) -> str:
    if not usuario:
        return ""
    nombre = (usuario.get("nombre") or "").strip()
    correo = (usuario.get("correo") or "").strip()
    return nombre or correo or f"Usuario #{usuario.get('id_usuario')}"


class ReferenceCache:
    """Id -> record lookups for usuarios, servicios and citas.

    Each map is rebuilt wholesale from the latest collection; entries are
    never patched in place.
    """

    def __init__(self):
        self.usuarios = {}
        self.servicios = {}
        self.citas = {}
        self.clientes = []
        self.trabajadores = []

    @classmethod
    def from_collections(cls, usuarios=(), servicios=(), citas=()):
        cache = cls()
        cache.rebuild_usuarios(usuarios)
        cache.rebuild_servicios(servicios)
        cache.rebuild_citas(citas)
        return cache

    def rebuild_usuarios(self, usuarios):
        by_id, clientes, trabajadores = {}, [], []
        for usuario in usuarios:
            if not usuario or usuario.get("id_usuario") is None:
                continue
            by_id[_key(usuario["id_usuario"])] = usuario
            rol = str(usuario.get("rol") or "").lower()
            if rol == "cliente":
                clientes.append(usuario)
            elif rol == "trabajador":
                trabajadores.append(usuario)

        clientes.sort(key=lambda u: sort_key(user_display_name(u)))
        trabajadores.sort(key=lambda u: sort_key(user_display_name(u)))
        self.usuarios, self.clientes, self.trabajadores = by_id, clientes, trabajadores

    def rebuild_servicios(self, servicios):
        self.servicios = {
            _key(s["id_servicio"]): s
            for s in servicios
            if s and s.get("id_servicio") is not None
        }

    def rebuild_citas(self, citas):
        self.citas = {
            _key(c["id_cita"]): c
            for c in citas
            if c and c.get("id_cita") is not None
        }

    def usuario(self, id):
        return self.usuarios.get(_key(id))

    def servicio(self, id):
        return self.servicios.get(_key(id))

    def cita(self, id):
        return self.citas.get(_key(id))

    def user_label(self, id) -> str:
        if id is None:
            return "-"
        usuario = self.usuario(id)
        return user_display_name(usuario) if usuario else f"ID {id}"

    def service_label(self, id) -> str:
        if id is None:
            return "-"
        servicio = self.servicio(id)
        if servicio and servicio.get("nombre_servicio"):
            return servicio["nombre_servicio"]
        return f"Servicio #{id}"

    def cita_label(self, cita) -> str:
        if not cita:
            return ""
        parts = [
            f"Cita #{cita.get('id_cita')}",
            self.user_label(cita.get("id_cliente")),
            self.service_label(cita.get("id_servicio")),
        ]
        when = []
        fecha = parse_timestamp(cita.get("fecha_cita"))
        if fecha is not None:
            when.append(fecha.strftime("%d/%m/%Y"))
        if cita.get("hora_cita"):
            when.append(cita["hora_cita"])
        if when:
            parts.append(" ".join(when))
        return " • ".join(parts)
