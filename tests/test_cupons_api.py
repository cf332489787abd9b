"""Coupon endpoints on the in-memory backend."""

import json

import pytest

from conftest import days_from_now


def cupon_payload(**overrides):
    payload = {
        "codigo": "navidad2025",
        "descuento": 25,
        "fechaExpiracion": days_from_now(60).isoformat(),
        "usoMaximo": 50,
    }
    payload.update(overrides)
    return payload


def test_create_cupon(admin_client):
    response = admin_client.post("/cupons", json=cupon_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["codigo"] == "NAVIDAD2025"
    assert data["usoActual"] == 0
    assert data["activo"] is True
    assert set(data) == {"id", "codigo", "descuento", "fechaExpiracion", "activo", "usoMaximo", "usoActual"}


def test_create_cupon_ignores_client_usage_count(admin_client):
    response = admin_client.post("/cupons", json=cupon_payload(usoActual=30))
    assert response.json()["usoActual"] == 0


def test_create_duplicate_code_conflicts(admin_client):
    admin_client.post("/cupons", json=cupon_payload())

    response = admin_client.post("/cupons", json=cupon_payload(codigo="NAVIDAD2025"))

    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


def test_create_discount_bounds(admin_client):
    assert admin_client.post("/cupons", json=cupon_payload(codigo="a", descuento=-1)).status_code == 400
    assert admin_client.post("/cupons", json=cupon_payload(codigo="b", descuento=101)).status_code == 400
    assert admin_client.post("/cupons", json=cupon_payload(codigo="c", descuento=0)).status_code == 201
    assert admin_client.post("/cupons", json=cupon_payload(codigo="d", descuento=100)).status_code == 201


def test_create_missing_field_is_bad_request(admin_client):
    payload = cupon_payload()
    del payload["usoMaximo"]

    response = admin_client.post("/cupons", json=payload)

    assert response.status_code == 400
    assert "usoMaximo" in response.json()["detail"]


def test_admin_routes_require_session(client):
    assert client.get("/cupons").status_code == 401
    assert client.post("/cupons", json=cupon_payload()).status_code == 401
    assert client.patch("/cupons/whatever/deshabilitar").status_code == 401


def test_public_lookup_and_use(admin_client):
    admin_client.post("/cupons", json=cupon_payload())
    admin_client.post("/auth/logout")

    lookup = admin_client.get("/cupons/codigo/navidad2025")
    assert lookup.status_code == 200
    assert lookup.json()["codigo"] == "NAVIDAD2025"

    used = admin_client.post("/cupons/navidad2025/usar")
    assert used.status_code == 200
    assert used.json()["usoActual"] == 1


def test_use_until_exhausted(admin_client):
    created = admin_client.post("/cupons", json=cupon_payload()).json()
    admin_client.put(f"/cupons/{created['id']}", json={"usoActual": 49})

    last = admin_client.post("/cupons/NAVIDAD2025/usar")
    assert last.status_code == 200
    assert last.json()["usoActual"] == 50

    exhausted = admin_client.post("/cupons/NAVIDAD2025/usar")
    assert exhausted.status_code == 400
    assert exhausted.json()["detail"] == "Cupon has reached maximum uses"


def test_use_unknown_code(client):
    assert client.post("/cupons/NOPE/usar").status_code == 404


def test_disable_enable_cycle(admin_client):
    created = admin_client.post("/cupons", json=cupon_payload()).json()
    cupon_id = created["id"]

    disabled = admin_client.patch(f"/cupons/{cupon_id}/deshabilitar")
    assert disabled.status_code == 200
    assert disabled.json()["activo"] is False

    again = admin_client.patch(f"/cupons/{cupon_id}/deshabilitar")
    assert again.status_code == 400
    assert again.json()["detail"] == "Cupon is already disabled"

    rejected = admin_client.post("/cupons/NAVIDAD2025/usar")
    assert rejected.status_code == 400
    assert rejected.json()["detail"] == "Cupon is not active"
    assert admin_client.get("/cupons/activos").json() == []

    enabled = admin_client.patch(f"/cupons/{cupon_id}/habilitar")
    assert enabled.json()["activo"] is True
    assert [c["codigo"] for c in admin_client.get("/cupons/activos").json()] == ["NAVIDAD2025"]


def test_update_partial(admin_client):
    created = admin_client.post("/cupons", json=cupon_payload()).json()

    response = admin_client.put(f"/cupons/{created['id']}", json={"descuento": 30})

    assert response.status_code == 200
    data = response.json()
    assert data["descuento"] == 30
    assert data["usoMaximo"] == 50
    assert data["fechaExpiracion"] == created["fechaExpiracion"]


def test_list_newest_first(admin_client):
    admin_client.post("/cupons", json=cupon_payload(codigo="primero"))
    admin_client.post("/cupons", json=cupon_payload(codigo="segundo"))

    response = admin_client.get("/cupons")

    assert [c["codigo"] for c in response.json()] == ["SEGUNDO", "PRIMERO"]


def test_get_and_delete(admin_client):
    created = admin_client.post("/cupons", json=cupon_payload()).json()

    assert admin_client.get(f"/cupons/{created['id']}").status_code == 200
    assert admin_client.delete(f"/cupons/{created['id']}").status_code == 204
    assert admin_client.get(f"/cupons/{created['id']}").status_code == 404
    assert admin_client.delete(f"/cupons/{created['id']}").status_code == 404


def send_raw(client, method, url, payload):
    return client.request(method, url, content=json.dumps(payload),
                          headers={"Content-Type": "application/json"})


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_create_rejects_non_finite_discount(admin_client, value):
    response = send_raw(admin_client, "POST", "/cupons", cupon_payload(descuento=value))

    assert response.status_code == 400
    assert admin_client.get("/cupons").json() == []


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_update_rejects_non_finite_discount(admin_client, value):
    created = admin_client.post("/cupons", json=cupon_payload()).json()

    response = send_raw(admin_client, "PUT", f"/cupons/{created['id']}", {"descuento": value})

    assert response.status_code == 400
    assert admin_client.get(f"/cupons/{created['id']}").json()["descuento"] == 25


def test_blank_code_is_rejected(admin_client):
    assert admin_client.post("/cupons", json=cupon_payload(codigo="   ")).status_code == 400

    created = admin_client.post("/cupons", json=cupon_payload()).json()
    response = admin_client.put(f"/cupons/{created['id']}", json={"codigo": "  "})

    assert response.status_code == 400
    assert admin_client.get(f"/cupons/{created['id']}").json()["codigo"] == "NAVIDAD2025"
