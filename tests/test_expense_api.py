from datetime import timedelta

import pytest
from dateutil.parser import isoparse


def _create(client, usuario_id, descripcion="Café", monto=3.5, categoria_id=None):
    return client.post(
        "/gastos",
        json={
            "descripcion": descripcion,
            "monto": monto,
            "usuario_id": usuario_id,
            "categoria_id": categoria_id,
        },
    )


def test_created_expense_is_listed(client, register):
    user = register()
    resp = _create(client, user["id"], "Almuerzo", 15)
    assert resp.status_code == 201
    expense = resp.json()
    assert expense["descripcion"] == "Almuerzo"
    assert expense["monto"] == 15
    assert expense["categoria_id"] is None
    assert expense["fecha"]

    listed = client.get(f"/gastos/usuario/{user['id']}").json()
    assert [e["id"] for e in listed] == [expense["id"]]


@pytest.mark.parametrize(
    "payload",
    [
        {"monto": 10},
        {"descripcion": "", "monto": 10},
        {"descripcion": "x", "monto": 0},
        {"descripcion": "x", "monto": -5},
        {"descripcion": "x"},
    ],
)
def test_invalid_expense_is_rejected(client, register, payload):
    user = register()
    resp = client.post("/gastos", json={**payload, "usuario_id": user["id"]})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_expense_requires_user(client):
    resp = client.post("/gastos", json={"descripcion": "x", "monto": 3})
    assert resp.status_code == 400


def test_zero_category_is_stored_as_none(client, register):
    user = register()
    expense = _create(client, user["id"], categoria_id=0).json()
    assert expense["categoria_id"] is None


def test_expense_ids_are_unique(client, register):
    user = register()
    ids = {_create(client, user["id"], f"gasto {i}", i + 1).json()["id"] for i in range(5)}
    assert len(ids) == 5


def test_list_is_scoped_to_user_and_newest_first(client, register):
    ana = register("ana", "pw1")
    luis = register("luis", "pw2")
    first = _create(client, ana["id"], "primero").json()
    second = _create(client, ana["id"], "segundo").json()
    _create(client, luis["id"], "ajeno")

    listed = client.get(f"/gastos/usuario/{ana['id']}").json()
    assert all(e["usuario_id"] == ana["id"] for e in listed)
    assert [e["id"] for e in listed] == [second["id"], first["id"]]


def test_list_includes_category_name(client, register):
    user = register()
    comida = next(
        c for c in client.get(f"/categorias/usuario/{user['id']}").json()
        if c["nombre"] == "Comida"
    )
    _create(client, user["id"], "Pan", 2, comida["id"])

    listed = client.get(f"/gastos/usuario/{user['id']}").json()
    assert listed[0]["categoria_nombre"] == "Comida"


def test_update_expense_returns_joined_row(client, register):
    user = register()
    transporte = next(
        c for c in client.get(f"/categorias/usuario/{user['id']}").json()
        if c["nombre"] == "Transporte"
    )
    expense = _create(client, user["id"], "Taxi", 8).json()

    resp = client.put(
        f"/gastos/{expense['id']}",
        json={"descripcion": "Taxi aeropuerto", "monto": 20, "categoria_id": transporte["id"]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["descripcion"] == "Taxi aeropuerto"
    assert body["monto"] == 20
    assert body["categoria_nombre"] == "Transporte"
    assert body["fecha"] == expense["fecha"]


def test_update_missing_expense(client):
    resp = client.put("/gastos/404", json={"descripcion": "x", "monto": 1})
    assert resp.status_code == 404


def test_update_expense_validates_fields(client, register):
    user = register()
    expense = _create(client, user["id"]).json()
    resp = client.put(f"/gastos/{expense['id']}", json={"descripcion": "x", "monto": 0})
    assert resp.status_code == 400


def test_delete_expense(client, register):
    user = register()
    expense = _create(client, user["id"]).json()

    resp = client.delete(f"/gastos/{expense['id']}")
    assert resp.status_code == 200
    assert resp.json()["id_borrado"] == expense["id"]
    assert client.get(f"/gastos/usuario/{user['id']}").json() == []
    assert client.delete(f"/gastos/{expense['id']}").status_code == 404


def test_wrong_amount_type(client, register):
    user = register()
    resp = client.post(
        "/gastos", json={"descripcion": "x", "monto": "mucho", "usuario_id": user["id"]}
    )
    assert resp.status_code == 400
    assert "monto" in resp.json()["error"]


def _send_raw(client, method, url, body):
    return client.request(
        method, url, content=body, headers={"Content-Type": "application/json"}
    )


@pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_amount_is_rejected(client, register, literal):
    user = register()
    resp = _send_raw(
        client,
        "POST",
        "/gastos",
        f'{{"descripcion": "x", "monto": {literal}, "usuario_id": {user["id"]}}}',
    )
    assert resp.status_code == 400
    assert "error" in resp.json()

    expense = _create(client, user["id"]).json()
    resp = _send_raw(
        client, "PUT", f"/gastos/{expense['id']}", f'{{"descripcion": "x", "monto": {literal}}}'
    )
    assert resp.status_code == 400

    listed = client.get(f"/gastos/usuario/{user['id']}").json()
    assert [e["monto"] for e in listed] == [3.5]


def test_expense_timestamp_carries_utc_offset(client, register):
    user = register()
    expense = _create(client, user["id"]).json()
    assert isoparse(expense["fecha"]).utcoffset() == timedelta(0)
