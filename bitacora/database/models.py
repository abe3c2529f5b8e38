"""
SQLAlchemy ORM models for persistence

Models:
- EntrevistaDB: sesiones de entrevista con un estudiante
- EtiquetaDB: categorías de observación compartidas entre entrevistas
- TextoDB: observaciones de texto libre (una entrevista, una etiqueta)
"""
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..core.constants import MAX_ID_LENGTH, MAX_NOMBRE_ETIQUETA, utc_now
from .base import Base, BaseModel


class EntrevistaDB(Base, BaseModel):
    """
    Una sesión fechada entre un tutor y un estudiante.

    La identidad de secuencia (estudiante_id, anio, numero_entrevista) es
    inmutable y única: crear la misma tupla dos veces falla con IntegrityError.
    """

    __tablename__ = "entrevistas"

    estudiante_id = Column(String(MAX_ID_LENGTH), nullable=False, index=True)
    usuario_id = Column(String(MAX_ID_LENGTH), nullable=True, index=True)  # Entrevistador

    fecha = Column(DateTime(timezone=True), nullable=False)
    nombre_tutor = Column(String(255), nullable=True)
    anio = Column(Integer, nullable=False)
    numero_entrevista = Column(Integer, nullable=False)
    duracion_minutos = Column(Integer, nullable=True)
    tipo_entrevista = Column(String(50), nullable=True)
    estado = Column(String(50), nullable=True)

    # Campos de resumen en texto libre
    observaciones = Column(Text, nullable=True)
    temas_abordados = Column(Text, nullable=True)

    textos = relationship(
        "TextoDB",
        back_populates="entrevista",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TextoDB.fecha.desc()",
    )

    __table_args__ = (
        UniqueConstraint(
            "estudiante_id", "anio", "numero_entrevista",
            name="uq_entrevista_estudiante_anio_numero",
        ),
        # Query: entrevistas de un estudiante ordenadas por fecha
        Index("idx_entrevista_estudiante_fecha", "estudiante_id", "fecha"),
        CheckConstraint("numero_entrevista > 0", name="ck_entrevista_numero_positivo"),
        CheckConstraint(
            "duracion_minutos IS NULL OR duracion_minutos >= 0",
            name="ck_entrevista_duracion_no_negativa",
        ),
    )


class EtiquetaDB(Base, BaseModel):
    """Categoría de observación (ej. "Rendimiento Académico"), creada de forma perezosa"""

    __tablename__ = "etiquetas"

    nombre_etiqueta = Column(String(MAX_NOMBRE_ETIQUETA), nullable=False, unique=True)
    descripcion = Column(Text, nullable=True)

    textos = relationship("TextoDB", back_populates="etiqueta")


class TextoDB(Base, BaseModel):
    """Observación de texto libre asociada a una entrevista y a una etiqueta"""

    __tablename__ = "textos"

    entrevista_id = Column(
        String(36), ForeignKey("entrevistas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    nombre_etiqueta = Column(
        String(MAX_NOMBRE_ETIQUETA), ForeignKey("etiquetas.nombre_etiqueta"), nullable=False
    )
    contenido = Column(Text, nullable=False)
    fecha = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    contexto = Column(Text, nullable=True)

    entrevista = relationship("EntrevistaDB", back_populates="textos")
    etiqueta = relationship("EtiquetaDB", back_populates="textos")

    __table_args__ = (
        # Query: historial por etiqueta dentro de un conjunto de entrevistas, fecha DESC
        Index("idx_texto_entrevista_etiqueta_fecha", "entrevista_id", "nombre_etiqueta", "fecha"),
        Index("idx_texto_etiqueta", "nombre_etiqueta"),
    )
