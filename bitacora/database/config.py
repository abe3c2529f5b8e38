"""
Configuración de la base de datos y manejo de sesiones SQLAlchemy
"""
import logging
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..core.config import settings
from .base import Base

logger = logging.getLogger(__name__)


class DatabaseConfig:
    """
    Agrupa engine y fábrica de sesiones para una URL de base de datos.

    En SQLite se habilitan las foreign keys (desactivadas por defecto) para
    que el ON DELETE CASCADE de textos funcione igual que en PostgreSQL.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        self.engine: Engine = create_engine(
            database_url,
            echo=echo,
            future=True,
            connect_args=connect_args,
        )
        if database_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ensured", extra={"database_url": _safe_url(self.database_url)})

    def get_session(self) -> Session:
        """Sesión nueva (el llamador debe cerrarla)"""
        return self.SessionLocal()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _safe_url(url: str) -> str:
    # Oculta credenciales en logs
    if "@" in url:
        scheme, _, rest = url.partition("://")
        return f"{scheme}://***@{rest.split('@', 1)[1]}"
    return url


_db_config: Optional[DatabaseConfig] = None


def get_db_config() -> DatabaseConfig:
    """Singleton perezoso con la configuración de settings"""
    global _db_config
    if _db_config is None:
        _db_config = DatabaseConfig(settings.database_url, echo=settings.database_echo)
    return _db_config


def init_database(database_url: Optional[str] = None) -> DatabaseConfig:
    """
    Inicializa (o reinicializa con otra URL) la base de datos y crea las tablas.
    """
    global _db_config
    if database_url is not None:
        _db_config = DatabaseConfig(database_url, echo=settings.database_echo)
    config = get_db_config()
    config.create_all()
    return config


def get_db_session() -> Generator[Session, None, None]:
    """Dependencia FastAPI: una sesión por request, siempre cerrada"""
    db = get_db_config().get_session()
    try:
        yield db
    finally:
        db.close()
