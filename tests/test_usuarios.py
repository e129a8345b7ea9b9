from conftest import cita_payload
from peluqueria.auth import verify_password
from peluqueria.models import Usuario


def new_usuario(**overrides):
    payload = {
        "nombre": "Ana",
        "correo": "ana@example.com",
        "contrasena": "ana12345",
        "telefono": "3001234567",
        "rol": "cliente",
        "estado": "activo",
    }
    payload.update(overrides)
    return payload


def test_create_usuario_returns_201_and_location(client):
    response = client.post("/api/usuarios", json=new_usuario())

    assert response.status_code == 201
    body = response.json()
    assert body["id_usuario"] > 0
    assert response.headers["location"] == f"/api/usuarios/{body['id_usuario']}"
    assert "contrasena" not in body
    assert "contrasena_hash" not in body


def test_password_is_stored_hashed(client, session):
    created = client.post("/api/usuarios", json=new_usuario()).json()

    stored = session.get(Usuario, created["id_usuario"])
    assert stored.contrasena_hash != "ana12345"
    assert verify_password("ana12345", stored.contrasena_hash)


def test_list_and_get_usuario(client):
    created = client.post("/api/usuarios", json=new_usuario()).json()

    listed = client.get("/api/usuarios").json()
    assert [u["correo"] for u in listed] == ["ana@example.com"]

    fetched = client.get(f"/api/usuarios/{created['id_usuario']}")
    assert fetched.status_code == 200
    assert fetched.json()["nombre"] == "Ana"


def test_get_missing_usuario_is_404(client):
    response = client.get("/api/usuarios/999")

    assert response.status_code == 404
    assert response.json() == {"message": "El usuario con ID 999 no existe"}


def test_create_requires_password(client):
    response = client.post("/api/usuarios", json=new_usuario(contrasena=""))

    assert response.status_code == 400
    assert response.json()["message"] == "La contraseña es requerida para nuevos usuarios"


def test_create_rejects_unknown_role(client):
    response = client.post("/api/usuarios", json=new_usuario(rol="gerente"))

    assert response.status_code == 400
    assert response.json()["message"].startswith("El rol debe ser uno de")


def test_role_and_state_are_stored_lowercase(client):
    body = client.post("/api/usuarios", json=new_usuario(rol="Cliente", estado="ACTIVO")).json()

    assert body["rol"] == "cliente"
    assert body["estado"] == "activo"


def test_duplicate_email_is_rejected(client):
    client.post("/api/usuarios", json=new_usuario())
    response = client.post("/api/usuarios", json=new_usuario(nombre="Otra", correo="ANA@example.com"))

    assert response.status_code == 400
    assert response.json()["message"] == "Ya existe un usuario con ese correo electrónico"


def test_null_body_is_rejected(client):
    response = client.post("/api/usuarios", content="null", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert "message" in response.json()


def test_update_keeps_password_when_blank(client, session):
    created = client.post("/api/usuarios", json=new_usuario()).json()
    id = created["id_usuario"]

    response = client.put(
        f"/api/usuarios/{id}",
        json=new_usuario(id_usuario=id, nombre="Ana María", contrasena="", estado="inactivo"),
    )

    assert response.status_code == 200
    assert response.json()["nombre"] == "Ana María"
    assert response.json()["estado"] == "inactivo"
    assert verify_password("ana12345", session.get(Usuario, id).contrasena_hash)


def test_update_rehashes_new_password(client, session):
    id = client.post("/api/usuarios", json=new_usuario()).json()["id_usuario"]

    client.put(f"/api/usuarios/{id}", json=new_usuario(id_usuario=id, contrasena="nueva9876"))

    assert verify_password("nueva9876", session.get(Usuario, id).contrasena_hash)


def test_update_with_mismatched_id_is_400(client):
    id = client.post("/api/usuarios", json=new_usuario()).json()["id_usuario"]

    response = client.put(f"/api/usuarios/{id}", json=new_usuario(id_usuario=id + 1))

    assert response.status_code == 400
    assert response.json()["message"] == "El ID de la URL no coincide con el ID del usuario"


def test_update_missing_usuario_is_404(client):
    response = client.put("/api/usuarios/42", json=new_usuario(id_usuario=42))

    assert response.status_code == 404


def test_delete_usuario(client):
    id = client.post("/api/usuarios", json=new_usuario()).json()["id_usuario"]

    response = client.delete(f"/api/usuarios/{id}")

    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/api/usuarios/{id}").status_code == 404


def test_delete_missing_usuario_is_404(client):
    response = client.delete("/api/usuarios/999")

    assert response.status_code == 404
    assert response.json() == {"message": "El usuario con ID 999 no existe"}


def test_delete_usuario_with_citas_is_500_with_cause(client, salon):
    client.post("/api/citas", json=cita_payload(salon))
    id = salon["cliente"]["id_usuario"]

    response = client.delete(f"/api/usuarios/{id}")

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Error al eliminar el usuario de la base de datos"
    assert "FOREIGN KEY" in body["error"]
    assert client.get(f"/api/usuarios/{id}").status_code == 200
