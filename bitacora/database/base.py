"""
Base declarativa y columnas comunes para los modelos ORM
"""
from uuid import uuid4

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declarative_base

from ..core.constants import utc_now

Base = declarative_base()


class BaseModel:
    """
    Mixin con las columnas que comparten todas las tablas.

    - id: UUID en formato string (36 caracteres)
    - created_at / updated_at: timestamps UTC mantenidos por SQLAlchemy
    """

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"
