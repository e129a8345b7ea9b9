# peluqueria/models.py

from typing import Optional
from datetime import datetime

from sqlmodel import SQLModel, Field


class Usuario(SQLModel, table=True):
    __tablename__ = "usuarios"

    id_usuario: Optional[int] = Field(default=None, primary_key=True)
    nombre: str = Field(max_length=100)
    correo: str = Field(max_length=100, index=True, unique=True)
    contrasena_hash: str = Field(max_length=255)
    telefono: Optional[str] = Field(default=None, max_length=20)
    rol: str = Field(max_length=20)  # administrador, trabajador or cliente
    estado: str = Field(default="activo", max_length=20)
    fecha_registro: datetime


class Servicio(SQLModel, table=True):
    __tablename__ = "servicios"

    id_servicio: Optional[int] = Field(default=None, primary_key=True)
    nombre_servicio: str = Field(max_length=100)
    descripcion: Optional[str] = Field(default=None, max_length=500)
    precio: float
    duracion_minutos: int


class Cita(SQLModel, table=True):
    __tablename__ = "citas"

    id_cita: Optional[int] = Field(default=None, primary_key=True)
    id_cliente: int = Field(foreign_key="usuarios.id_usuario", index=True)
    id_trabajador: int = Field(foreign_key="usuarios.id_usuario", index=True)
    id_servicio: int = Field(foreign_key="servicios.id_servicio")
    fecha_cita: datetime = Field(index=True)
    hora_cita: str = Field(max_length=20)  # "09:09 a. m."
    estado: str = Field(default="pendiente", max_length=30)
    observaciones: Optional[str] = Field(default=None, max_length=500)
    fecha_creacion: datetime


class Factura(SQLModel, table=True):
    __tablename__ = "facturas"

    id_factura: Optional[int] = Field(default=None, primary_key=True)
    id_cita: int = Field(foreign_key="citas.id_cita", index=True)
    total: float
    metodo_pago: str = Field(max_length=30)
    fecha_emision: datetime = Field(index=True)
