import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from peluqueria.admin.api import ApiClient
from peluqueria.admin.session import SessionStore
from peluqueria.auth import hash_password
from peluqueria.db import build_engine, get_session
from peluqueria.main import app
from peluqueria.models import Usuario
from peluqueria.timefmt import utcnow


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    # no context manager: the lifespan would create tables in the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api(client):
    return ApiClient(base_url="http://testserver/api", session=client, timeout=5)


@pytest.fixture
def store(tmp_path):
    return SessionStore(tmp_path / "admin_session.json")


def make_usuario(session, nombre, correo, rol, estado="activo", contrasena="secreta123"):
    usuario = Usuario(
        nombre=nombre,
        correo=correo,
        contrasena_hash=hash_password(contrasena),
        rol=rol,
        estado=estado,
        fecha_registro=utcnow(),
    )
    session.add(usuario)
    session.commit()
    session.refresh(usuario)
    return usuario


@pytest.fixture
def salon(client):
    """A client, a worker and a service created through the API."""
    ana = client.post("/api/usuarios", json={
        "nombre": "Ana", "correo": "ana@example.com", "contrasena": "ana12345",
        "telefono": "3001234567", "rol": "cliente", "estado": "activo",
    }).json()
    luis = client.post("/api/usuarios", json={
        "nombre": "Luis", "correo": "luis@example.com", "contrasena": "luis12345",
        "rol": "trabajador", "estado": "activo",
    }).json()
    corte = client.post("/api/servicios", json={
        "nombre_servicio": "Corte", "descripcion": "Corte clásico",
        "precio": 25000, "duracion_minutos": 30,
    }).json()
    return {"cliente": ana, "trabajador": luis, "servicio": corte}


def cita_payload(salon, **overrides):
    payload = {
        "id_cita": 0,
        "id_cliente": salon["cliente"]["id_usuario"],
        "id_trabajador": salon["trabajador"]["id_usuario"],
        "id_servicio": salon["servicio"]["id_servicio"],
        "fecha_cita": "2025-11-10T09:09:00",
        "hora_cita": "09:09 a. m.",
        "estado": "pendiente",
        "observaciones": "",
    }
    payload.update(overrides)
    return payload
