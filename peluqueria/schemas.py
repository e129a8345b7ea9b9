# peluqueria/schemas.py

from pydantic import BaseModel
from enum import Enum
from datetime import datetime
from typing import List, Optional


class UserRole(str, Enum):
    administrador = "administrador"
    trabajador = "trabajador"
    cliente = "cliente"


class UserState(str, Enum):
    activo = "activo"
    inactivo = "inactivo"


# Request bodies keep every field optional so the routes can answer with
# their own 400 messages instead of a generic schema error.

class UsuarioIn(BaseModel):
    id_usuario: Optional[int] = None
    nombre: Optional[str] = None
    correo: Optional[str] = None
    contrasena: Optional[str] = None
    telefono: Optional[str] = None
    rol: Optional[str] = None
    estado: Optional[str] = None
    fecha_registro: Optional[str] = None


class UsuarioPublic(BaseModel):
    id_usuario: int
    nombre: str
    correo: str
    telefono: Optional[str] = None
    rol: str
    estado: str
    fecha_registro: datetime


class ServicioIn(BaseModel):
    id_servicio: Optional[int] = None
    nombre_servicio: Optional[str] = None
    descripcion: Optional[str] = None
    precio: Optional[float] = None
    duracion_minutos: Optional[int] = None


class ServicioPublic(BaseModel):
    id_servicio: int
    nombre_servicio: str
    descripcion: Optional[str] = None
    precio: float
    duracion_minutos: int


class CitaIn(BaseModel):
    id_cita: Optional[int] = None
    id_cliente: Optional[int] = None
    id_trabajador: Optional[int] = None
    id_servicio: Optional[int] = None
    fecha_cita: Optional[str] = None
    hora_cita: Optional[str] = None
    estado: Optional[str] = None
    observaciones: Optional[str] = None
    fecha_creacion: Optional[str] = None


class CitaPublic(BaseModel):
    id_cita: int
    id_cliente: int
    id_trabajador: int
    id_servicio: int
    fecha_cita: datetime
    hora_cita: str
    estado: str
    observaciones: Optional[str] = None
    fecha_creacion: datetime


class FacturaIn(BaseModel):
    id_factura: Optional[int] = None
    id_cita: Optional[int] = None
    total: Optional[float] = None
    metodo_pago: Optional[str] = None
    fecha_emision: Optional[str] = None


class FacturaPublic(BaseModel):
    id_factura: int
    id_cita: int
    total: float
    metodo_pago: str
    fecha_emision: datetime


class LoginData(BaseModel):
    correo: str
    contrasena: str


class AdminSession(BaseModel):
    id: int
    nombre: str
    correo: str
    telefono: Optional[str] = None
    rol: UserRole
    timestamp: str


class DailyStats(BaseModel):
    total_citas: int
    citas_completadas: int
    facturas_generadas: int
    ventas_totales: float


class DailyReport(BaseModel):
    fecha: str
    stats: DailyStats
    servicios: List[ServicioPublic]
    citas: List[CitaPublic]
    facturas: List[FacturaPublic]
