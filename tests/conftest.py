"""Pytest configuration and fixtures."""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bitacora.api.deps import get_db
from bitacora.api.main import create_app
from bitacora.database import Base
from bitacora.database.config import _enable_sqlite_foreign_keys
from bitacora.services.entrevista_service import EntrevistaService


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of the test (StaticPool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def service(session):
    return EntrevistaService(session)


@pytest.fixture
def make_entrevista(service):
    """Factory: create an interview through the repository."""

    def _make(estudiante_id="S1", numero_entrevista=1, anio=2025, fecha=None, **kwargs):
        return service.entrevistas.create(
            estudiante_id=estudiante_id,
            fecha=fecha or utc(anio, 3, numero_entrevista, 10, 0),
            anio=anio,
            numero_entrevista=numero_entrevista,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_texto(service):
    """Factory: create a note with an explicit timestamp (tag created if needed)."""

    def _make(entrevista_id, nombre_etiqueta, contenido, fecha):
        service.etiquetas.get_or_create(nombre_etiqueta)
        return service.textos.create(
            entrevista_id=entrevista_id,
            nombre_etiqueta=nombre_etiqueta,
            contenido=contenido,
            fecha=fecha,
        )

    return _make


@pytest.fixture
def app(session_factory):
    app = create_app(init_db=False)

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
