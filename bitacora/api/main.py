"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .. import __version__
from ..core.config import settings
from ..core.exceptions import register_exception_handlers
from ..core.logging import setup_logging
from ..core.middleware import add_middlewares
from ..database.config import init_database
from .routers import entrevistas, etiquetas, health

_log = logging.getLogger("bitacora.startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_database()
    _log.info("Bitácora API lista", extra={"api_prefix": settings.api_prefix_normalized})
    yield


def create_app(init_db: bool = True, title: Optional[str] = None) -> FastAPI:
    """
    Construye la aplicación.

    Args:
        init_db: crear tablas al arrancar; los tests lo desactivan y
                 sobreescriben la dependencia get_db
    """
    setup_logging(settings.log_level)
    app = FastAPI(
        title=title or settings.app_name,
        version=__version__,
        lifespan=lifespan if init_db else None,
    )

    add_middlewares(app)
    register_exception_handlers(app)

    prefix = settings.api_prefix_normalized
    app.include_router(health.router, prefix=prefix)
    app.include_router(entrevistas.router, prefix=prefix)
    app.include_router(etiquetas.router, prefix=prefix)
    return app


app = create_app()
