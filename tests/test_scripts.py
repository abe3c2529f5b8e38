"""Tests for the command line entry points."""
from sqlalchemy import inspect

from bitacora.database import config as db_config
from bitacora.scripts import init_db, run_api


def test_init_db_creates_tables(tmp_path, monkeypatch):
    monkeypatch.setattr(db_config, "_db_config", None)
    url = f"sqlite:///{tmp_path / 'bitacora.db'}"

    init_db.main(["--database-url", url])

    tables = set(inspect(db_config.get_db_config().engine).get_table_names())
    assert {"entrevistas", "etiquetas", "textos"} <= tables


def test_run_api_production_flags(monkeypatch):
    calls = []
    monkeypatch.setattr(run_api.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    run_api.main(["--production", "--port", "9000", "--workers", "2"])

    app, kwargs = calls[0]
    assert app == "bitacora.api.main:app"
    assert kwargs["port"] == 9000
    assert kwargs["workers"] == 2
    assert kwargs["reload"] is False


def test_run_api_defaults_to_dev_server(monkeypatch):
    calls = []
    monkeypatch.setattr(run_api.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))

    run_api.main([])

    assert calls[0]["reload"] is True
    assert calls[0]["port"] == 8000
