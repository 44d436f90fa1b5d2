def _create(client, usuario_id, descripcion="Sueldo", monto=1500):
    return client.post(
        "/ingresos",
        json={"usuario_id": usuario_id, "descripcion": descripcion, "monto": monto},
    )


def test_create_and_list_incomes(client, register):
    ana = register("ana", "pw1")
    luis = register("luis", "pw2")
    resp = _create(client, ana["id"])
    assert resp.status_code == 201
    income = resp.json()
    assert set(income) == {"id", "usuario_id", "descripcion", "monto", "fecha"}
    second = _create(client, ana["id"], "Freelance", 300).json()
    _create(client, luis["id"], "Ajeno", 10)

    listed = client.get(f"/ingresos/usuario/{ana['id']}").json()
    assert [i["id"] for i in listed] == [second["id"], income["id"]]


def test_invalid_income_is_rejected(client, register):
    user = register()
    assert _create(client, user["id"], monto=0).status_code == 400
    assert _create(client, user["id"], descripcion="").status_code == 400
    assert client.post("/ingresos", json={"descripcion": "x", "monto": 1}).status_code == 400


def test_update_income(client, register):
    user = register()
    income = _create(client, user["id"]).json()

    resp = client.put(
        f"/ingresos/{income['id']}", json={"descripcion": "Sueldo marzo", "monto": 1600}
    )
    assert resp.status_code == 200
    assert resp.json()["descripcion"] == "Sueldo marzo"
    assert resp.json()["monto"] == 1600

    resp = client.put(f"/ingresos/{income['id']}", json={"descripcion": "x", "monto": -1})
    assert resp.status_code == 400


def test_update_missing_income(client):
    resp = client.put("/ingresos/123", json={"descripcion": "x", "monto": 1})
    assert resp.status_code == 404
    assert "error" in resp.json()


def test_delete_income(client, register):
    user = register()
    income = _create(client, user["id"]).json()

    resp = client.delete(f"/ingresos/{income['id']}")
    assert resp.status_code == 200
    assert resp.json()["id_eliminado"] == income["id"]
    assert client.delete(f"/ingresos/{income['id']}").status_code == 404


def test_non_finite_amount_is_rejected(client, register):
    user = register()
    headers = {"Content-Type": "application/json"}
    resp = client.post(
        "/ingresos",
        content=f'{{"usuario_id": {user["id"]}, "descripcion": "x", "monto": Infinity}}',
        headers=headers,
    )
    assert resp.status_code == 400

    income = _create(client, user["id"]).json()
    resp = client.put(
        f"/ingresos/{income['id']}", content='{"descripcion": "x", "monto": NaN}', headers=headers
    )
    assert resp.status_code == 400
    assert client.get(f"/ingresos/usuario/{user['id']}").json()[0]["monto"] == 1500
