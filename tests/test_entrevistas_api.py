"""HTTP tests for the entrevistas, etiquetas and health routers."""


def _crear(client, **overrides):
    payload = {
        "id_estudiante": 42,
        "id_usuario": 7,
        "fecha": "2025-03-10T14:00:00Z",
        "nombre_tutor": "Ana Pérez",
        "año": 2025,
        "numero_entrevista": 1,
        "duracion_minutos": 30,
        "tipo_entrevista": "seguimiento",
        "estado": "realizada",
    }
    payload.update(overrides)
    return client.post("/entrevistas", json=payload)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-Id": "abc123"})

    assert response.headers["X-Request-Id"] == "abc123"


def test_create_entrevista(client):
    response = _crear(client)

    assert response.status_code == 201
    body = response.json()
    assert body["estudiante_id"] == "42"
    assert body["usuario_id"] == "7"
    assert body["anio"] == 2025
    assert body["numero_entrevista"] == 1
    assert body["textos"] == []
    assert body["fecha"].startswith("2025-03-10T14:00:00")


def test_create_duplicate_entrevista_returns_400(client):
    assert _crear(client).status_code == 201

    response = _crear(client, nombre_tutor="Otro tutor")

    assert response.status_code == 400
    assert response.json()["message"] == "Ya existe la entrevista 1 para el año 2025"
    assert response.json()["error_code"] == "ENTREVISTA_DUPLICADA"
    assert len(client.get("/entrevistas/estudiante/42").json()) == 1


def test_create_with_invalid_sequence_number_is_rejected(client):
    response = _crear(client, numero_entrevista=0)

    assert response.status_code == 422
    assert response.json()["message"] == "Validation error"


def test_get_missing_entrevista_returns_404(client):
    response = client.get("/entrevistas/no-existe")

    assert response.status_code == 404
    assert response.json()["message"] == "Entrevista no encontrada"
    assert response.json()["error_code"] == "ENTREVISTA_NOT_FOUND"


def test_add_texto(client):
    entrevista = _crear(client).json()

    response = client.post(
        f"/entrevistas/{entrevista['id']}/textos",
        json={"nombre_etiqueta": "Salud", "contenido": "  Buena asistencia ", "contexto": "Entrevista con Juan"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["contenido"] == "Buena asistencia"
    assert body["nombre_etiqueta"] == "Salud"
    assert body["etiqueta"]["nombre_etiqueta"] == "Salud"
    assert body["entrevista"]["id"] == entrevista["id"]
    assert body["entrevista"]["numero_entrevista"] == 1
    assert body["contexto"] == "Entrevista con Juan"

    etiquetas = [e["nombre_etiqueta"] for e in client.get("/etiquetas").json()]
    assert etiquetas == ["Salud"]


def test_add_texto_to_missing_entrevista_does_not_create_tag(client):
    response = client.post(
        "/entrevistas/no-existe/textos",
        json={"nombre_etiqueta": "Etiqueta Fantasma", "contenido": "hola"},
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Entrevista no encontrada"
    assert client.get("/etiquetas").json() == []


def test_add_blank_texto_is_rejected(client):
    entrevista = _crear(client).json()

    response = client.post(
        f"/entrevistas/{entrevista['id']}/textos",
        json={"nombre_etiqueta": "Salud", "contenido": "   "},
    )

    assert response.status_code == 422
    assert client.get(f"/entrevistas/{entrevista['id']}/textos").json() == []


def test_history_across_interviews(client):
    primera = _crear(client, numero_entrevista=1).json()
    segunda = _crear(client, numero_entrevista=2, fecha="2025-04-10T14:00:00Z").json()
    otra = _crear(client, id_estudiante="99").json()

    client.post(f"/entrevistas/{primera['id']}/textos", json={"nombre_etiqueta": "Salud", "contenido": "primero"})
    client.post(f"/entrevistas/{segunda['id']}/textos", json={"nombre_etiqueta": "Salud", "contenido": "segundo"})
    client.post(f"/entrevistas/{segunda['id']}/textos", json={"nombre_etiqueta": "Conducta", "contenido": "otra"})
    client.post(f"/entrevistas/{otra['id']}/textos", json={"nombre_etiqueta": "Salud", "contenido": "ajeno"})

    response = client.get("/entrevistas/estudiante/42/etiqueta/Salud/textos")

    assert response.status_code == 200
    body = response.json()
    assert [t["contenido"] for t in body] == ["segundo", "primero"]
    assert [t["entrevista"]["numero_entrevista"] for t in body] == [2, 1]
    assert body[0]["fecha"] >= body[1]["fecha"]


def test_history_for_unknown_student_is_empty_list(client):
    response = client.get("/entrevistas/estudiante/desconocido/etiqueta/Salud/textos")

    assert response.status_code == 200
    assert response.json() == []


def test_history_with_encoded_tag_name(client):
    entrevista = _crear(client).json()
    client.post(
        f"/entrevistas/{entrevista['id']}/textos",
        json={"nombre_etiqueta": "Salud / Bienestar", "contenido": "duerme bien"},
    )

    response = client.get("/entrevistas/estudiante/42/etiqueta/Salud%20%2F%20Bienestar/textos")

    assert response.status_code == 200
    assert [t["contenido"] for t in response.json()] == ["duerme bien"]


def test_update_and_delete_texto(client):
    entrevista = _crear(client).json()
    texto = client.post(
        f"/entrevistas/{entrevista['id']}/textos",
        json={"nombre_etiqueta": "Salud", "contenido": "original"},
    ).json()

    response = client.patch(
        f"/entrevistas/{entrevista['id']}/textos/{texto['id']}",
        json={"contenido": "editado"},
    )
    assert response.status_code == 200
    assert response.json()["contenido"] == "editado"

    response = client.delete(f"/entrevistas/{entrevista['id']}/textos/{texto['id']}")
    assert response.status_code == 204
    assert client.get(f"/entrevistas/{entrevista['id']}/textos").json() == []


def test_update_entrevista_to_taken_sequence_returns_400(client):
    _crear(client, numero_entrevista=1)
    segunda = _crear(client, numero_entrevista=2).json()

    response = client.patch(f"/entrevistas/{segunda['id']}", json={"numero_entrevista": 1})

    assert response.status_code == 400
    assert response.json()["error_code"] == "ENTREVISTA_DUPLICADA"


def test_delete_entrevista_removes_its_textos(client):
    entrevista = _crear(client).json()
    client.post(f"/entrevistas/{entrevista['id']}/textos", json={"nombre_etiqueta": "Salud", "contenido": "x"})

    assert client.delete(f"/entrevistas/{entrevista['id']}").status_code == 204
    assert client.get(f"/entrevistas/{entrevista['id']}").status_code == 404
    assert client.get("/entrevistas/estudiante/42/etiqueta/Salud/textos").json() == []


def test_create_with_blank_initial_texto_is_rejected(client):
    response = _crear(client, etiquetas=[{"nombre_etiqueta": "Salud", "textos": [{"contenido": "   "}]}])

    assert response.status_code == 422
    assert client.get("/entrevistas").json() == []
    assert client.get("/etiquetas").json() == []


def test_create_strips_initial_texto(client):
    response = _crear(client, etiquetas=[{"nombre_etiqueta": "Salud", "textos": [{"contenido": "  duerme bien "}]}])

    assert response.status_code == 201
    assert [t["contenido"] for t in response.json()["textos"]] == ["duerme bien"]


def test_error_body_carries_details(client):
    response = client.get("/entrevistas/no-existe", headers={"X-Request-Id": "req-1"})

    assert response.json() == {
        "message": "Entrevista no encontrada",
        "error_code": "ENTREVISTA_NOT_FOUND",
        "details": {"entrevista_id": "no-existe"},
        "request_id": "req-1",
    }


def test_database_failure_returns_500_without_details(client, monkeypatch):
    from sqlalchemy.exc import OperationalError

    from bitacora.database.repositories import TextoRepository

    entrevista = _crear(client).json()

    def broken_create(self, *args, **kwargs):
        raise OperationalError("INSERT INTO textos", {}, Exception("disk I/O error"))

    monkeypatch.setattr(TextoRepository, "create", broken_create)

    response = client.post(
        f"/entrevistas/{entrevista['id']}/textos",
        json={"nombre_etiqueta": "Salud", "contenido": "hola"},
    )

    assert response.status_code == 500
    assert response.json()["error_code"] == "DATABASE_ERROR"
    assert "details" not in response.json()
