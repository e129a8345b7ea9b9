import pytest

from conftest import cita_payload


@pytest.fixture
def cita(client, salon):
    return client.post("/api/citas", json=cita_payload(salon)).json()


def factura_payload(cita, **overrides):
    payload = {
        "id_factura": 0,
        "id_cita": cita["id_cita"],
        "total": 25000,
        "metodo_pago": "efectivo",
        "fecha_emision": "2025-11-10T16:33:25Z",
    }
    payload.update(overrides)
    return payload


def test_create_factura(client, cita):
    response = client.post("/api/facturas", json=factura_payload(cita))

    assert response.status_code == 201
    factura = response.json()
    assert response.headers["location"] == f"/api/facturas/{factura['id_factura']}"
    assert factura["total"] == 25000
    assert factura["fecha_emision"].startswith("2025-11-10T16:33:25")


def test_missing_issue_date_defaults_to_now_on_create(client, cita):
    factura = client.post("/api/facturas", json=factura_payload(cita, fecha_emision=None)).json()

    assert factura["fecha_emision"]


def test_zero_total_is_rejected(client, cita):
    response = client.post("/api/facturas", json=factura_payload(cita, total=0))

    assert response.status_code == 400
    assert response.json()["message"] == "El total debe ser mayor a 0"
    assert client.get("/api/facturas").json() == []


def test_unknown_payment_method_is_rejected(client, cita):
    response = client.post("/api/facturas", json=factura_payload(cita, metodo_pago="bitcoin"))

    assert response.status_code == 400
    assert response.json()["message"].startswith("El método de pago debe ser uno de")


def test_unknown_cita_is_rejected(client, cita):
    response = client.post("/api/facturas", json=factura_payload(cita, id_cita=999))

    assert response.status_code == 400
    assert response.json()["message"] == "La cita con ID 999 no existe"


def test_update_requires_issue_date(client, cita):
    id = client.post("/api/facturas", json=factura_payload(cita)).json()["id_factura"]

    response = client.put(f"/api/facturas/{id}", json=factura_payload(cita, id_factura=id, fecha_emision=""))

    assert response.status_code == 400
    assert response.json()["message"] == "La fecha de emisión es requerida y debe ser válida"


def test_update_factura(client, cita):
    id = client.post("/api/facturas", json=factura_payload(cita)).json()["id_factura"]

    response = client.put(
        f"/api/facturas/{id}",
        json=factura_payload(cita, id_factura=id, total=30000, metodo_pago="nequi"),
    )

    assert response.status_code == 200
    assert response.json()["metodo_pago"] == "nequi"
    assert response.json()["total"] == 30000


def test_update_with_mismatched_id_is_400(client, cita):
    id = client.post("/api/facturas", json=factura_payload(cita)).json()["id_factura"]

    response = client.put(f"/api/facturas/{id}", json=factura_payload(cita, id_factura=id + 1))

    assert response.status_code == 400


def test_delete_factura_twice(client, cita):
    id = client.post("/api/facturas", json=factura_payload(cita)).json()["id_factura"]

    assert client.delete(f"/api/facturas/{id}").status_code == 204
    assert client.delete(f"/api/facturas/{id}").status_code == 404
