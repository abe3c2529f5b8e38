"""Tests for the repository layer."""
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from bitacora.database.config import DatabaseConfig
from bitacora.database.models import EntrevistaDB, EtiquetaDB, TextoDB


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_get_ids_by_estudiante_unknown_student_is_empty(service):
    assert service.entrevistas.get_ids_by_estudiante("nadie") == []


def test_get_ids_by_estudiante_only_returns_that_student(make_entrevista, service):
    a = make_entrevista("S1", 1)
    b = make_entrevista("S1", 2)
    make_entrevista("S2", 1)

    assert set(service.entrevistas.get_ids_by_estudiante("S1")) == {a.id, b.id}


def test_unique_constraint_on_sequence_tuple(make_entrevista, session):
    make_entrevista("S1", 1, anio=2025)

    with pytest.raises(IntegrityError):
        make_entrevista("S1", 1, anio=2025)

    # Session usable after the repository rollback
    assert session.query(EntrevistaDB).count() == 1


def test_exists_for_sequence(make_entrevista, service):
    entrevista = make_entrevista("S1", 1, anio=2025)

    assert service.entrevistas.exists_for_sequence("S1", 2025, 1)
    assert not service.entrevistas.exists_for_sequence("S1", 2024, 1)
    assert not service.entrevistas.exists_for_sequence("S2", 2025, 1)
    assert not service.entrevistas.exists_for_sequence("S1", 2025, 1, exclude_id=entrevista.id)


def test_get_or_create_is_idempotent(service, session):
    first = service.etiquetas.get_or_create("Salud")
    second = service.etiquetas.get_or_create("Salud")

    assert first.id == second.id
    assert session.query(EtiquetaDB).filter_by(nombre_etiqueta="Salud").count() == 1


def test_insert_ignores_name_conflict(service, session):
    # Two writers that both saw "absent" and insert the same name
    service.etiquetas._insert_ignore_conflict("sqlite", "Conducta")
    service.etiquetas._insert_ignore_conflict("sqlite", "Conducta")
    session.commit()

    assert session.query(EtiquetaDB).filter_by(nombre_etiqueta="Conducta").count() == 1


def test_get_or_create_is_case_sensitive(service, session):
    service.etiquetas.get_or_create("Salud")
    service.etiquetas.get_or_create("salud")

    assert session.query(EtiquetaDB).count() == 2


def test_texto_create_defaults_to_server_time(make_entrevista, service):
    entrevista = make_entrevista()
    service.etiquetas.get_or_create("Salud")

    before = datetime.now(timezone.utc).replace(tzinfo=None)
    texto = service.textos.create(entrevista.id, "Salud", "Buena asistencia")

    assert texto.id
    assert texto.fecha.replace(tzinfo=None) >= before


def test_get_by_entrevistas_and_etiqueta_filters_and_orders(make_entrevista, make_texto, service):
    a = make_entrevista("S1", 1)
    b = make_entrevista("S1", 2)
    make_texto(a.id, "Salud", "viejo", utc(2025, 3, 1, 9))
    make_texto(b.id, "Salud", "nuevo", utc(2025, 3, 2, 9))
    make_texto(b.id, "Conducta", "otra etiqueta", utc(2025, 3, 3, 9))

    textos = service.textos.get_by_entrevistas_and_etiqueta([a.id, b.id], "Salud")

    assert [t.contenido for t in textos] == ["nuevo", "viejo"]
    assert all(t.etiqueta.nombre_etiqueta == "Salud" for t in textos)
    assert {t.entrevista.numero_entrevista for t in textos} == {1, 2}


def test_get_by_entrevistas_and_etiqueta_empty_ids(service):
    assert service.textos.get_by_entrevistas_and_etiqueta([], "Salud") == []


def test_delete_entrevista_cascades_to_textos(make_entrevista, make_texto, service, session):
    entrevista = make_entrevista()
    make_texto(entrevista.id, "Salud", "uno", utc(2025, 3, 1, 9))
    make_texto(entrevista.id, "Salud", "dos", utc(2025, 3, 1, 10))

    service.entrevistas.delete(entrevista)

    assert session.query(TextoDB).count() == 0
    # Tags are never deleted by the note flow
    assert session.query(EtiquetaDB).count() == 1


def test_database_config_enables_sqlite_foreign_keys():
    config = DatabaseConfig("sqlite://")
    try:
        with config.engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
    finally:
        config.engine.dispose()
