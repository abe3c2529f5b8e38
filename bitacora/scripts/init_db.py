"""
Script para inicializar las tablas de la bitácora (entrevistas, etiquetas, textos)

Uso:
    bitacora-init-db
    bitacora-init-db --database-url sqlite:///./otra.db
"""
import argparse
import logging

from ..core.config import settings
from ..core.logging import setup_logging
from ..database.config import init_database

logger = logging.getLogger(__name__)


def init_db(database_url=None) -> None:
    """Create all tables"""
    config = init_database(database_url)
    logger.info("Tables created successfully", extra={"tables": ["entrevistas", "etiquetas", "textos"]})
    print(f"✓ Tables created in {config.engine.url.render_as_string(hide_password=True)}")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Create the database tables")
    parser.add_argument(
        "--database-url",
        default=None,
        help=f"SQLAlchemy URL (default: {settings.database_url})",
    )
    args = parser.parse_args(argv)
    setup_logging(settings.log_level)
    init_db(args.database_url)


if __name__ == "__main__":
    main()
