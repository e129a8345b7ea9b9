from conftest import make_usuario


def login(client, correo, contrasena):
    return client.post("/api/auth/login", json={"correo": correo, "contrasena": contrasena})


def test_admin_login_returns_session_record(client, session):
    admin = make_usuario(session, "Valentina", "admin@example.com", "administrador")

    response = login(client, "Admin@Example.com", "secreta123")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == admin.id_usuario
    assert body["nombre"] == "Valentina"
    assert body["rol"] == "administrador"
    assert body["timestamp"]
    assert set(body) == {"id", "nombre", "correo", "telefono", "rol", "timestamp"}


def test_wrong_password_is_401(client, session):
    make_usuario(session, "Valentina", "admin@example.com", "administrador")

    response = login(client, "admin@example.com", "otra")

    assert response.status_code == 401
    assert response.json()["message"] == "Credenciales incorrectas"


def test_unknown_email_is_401(client):
    assert login(client, "nadie@example.com", "x").status_code == 401


def test_non_admin_is_403(client, session):
    make_usuario(session, "Ana", "ana@example.com", "cliente")

    response = login(client, "ana@example.com", "secreta123")

    assert response.status_code == 403
    assert response.json()["message"] == "Acceso denegado. Solo administradores pueden iniciar sesión"


def test_inactive_admin_is_403(client, session):
    make_usuario(session, "Valentina", "admin@example.com", "administrador", estado="inactivo")

    response = login(client, "admin@example.com", "secreta123")

    assert response.status_code == 403
    assert response.json()["message"] == "Tu cuenta no está activa. Contacta al administrador"


def test_empty_fields_are_400(client):
    response = login(client, "  ", "")

    assert response.status_code == 400
    assert response.json()["message"] == "Por favor, completa todos los campos"
