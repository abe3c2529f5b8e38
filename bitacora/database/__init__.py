"""
Database package

Provides:
- SQLAlchemy database configuration
- Database session management
- Base model for ORM
- ORM models (EntrevistaDB, EtiquetaDB, TextoDB)
- Repository pattern implementations
"""
from .config import DatabaseConfig, get_db_session, init_database, get_db_config
from .base import Base

# ORM Models
from .models import EntrevistaDB, EtiquetaDB, TextoDB

# Repositories
from .repositories import EntrevistaRepository, EtiquetaRepository, TextoRepository

__all__ = [
    # Configuration
    "DatabaseConfig",
    "get_db_session",
    "init_database",
    "get_db_config",
    "Base",
    # ORM Models
    "EntrevistaDB",
    "EtiquetaDB",
    "TextoDB",
    # Repositories
    "EntrevistaRepository",
    "EtiquetaRepository",
    "TextoRepository",
]
