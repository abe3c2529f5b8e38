"""
Schemas para entrevistas, etiquetas y textos
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ...core.constants import MAX_NOMBRE_ETIQUETA, MSG_CONTENIDO_VACIO, ensure_utc


def _id_to_str(value: Any) -> Any:
    # El front-end envía ids numéricos o string indistintamente
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# =============================================================================
# REQUESTS
# =============================================================================

class TextoInicialCreate(BaseModel):
    """Texto incluido al crear una entrevista"""
    contenido: str
    fecha: Optional[datetime] = None
    contexto: Optional[str] = None

    @field_validator("contenido")
    @classmethod
    def contenido_no_vacio(cls, value: str) -> str:
        if not value.strip():
            raise ValueError(MSG_CONTENIDO_VACIO)
        return value.strip()

    @field_validator("fecha")
    @classmethod
    def fecha_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None


class EtiquetaTextosCreate(BaseModel):
    """Etiqueta con sus textos iniciales"""
    nombre_etiqueta: str = Field(..., min_length=1, max_length=MAX_NOMBRE_ETIQUETA)
    textos: List[TextoInicialCreate] = []


class EntrevistaCreate(BaseModel):
    """Request para crear una entrevista"""
    estudiante_id: str = Field(..., validation_alias=AliasChoices("id_estudiante", "estudiante_id"))
    usuario_id: Optional[str] = Field(None, validation_alias=AliasChoices("id_usuario", "usuario_id"))
    fecha: datetime
    nombre_tutor: Optional[str] = None
    anio: int = Field(..., ge=1900, le=2200, validation_alias=AliasChoices("año", "anio"))
    numero_entrevista: int = Field(..., ge=1)
    duracion_minutos: Optional[int] = Field(None, ge=0)
    tipo_entrevista: Optional[str] = None
    estado: Optional[str] = None
    observaciones: Optional[str] = None
    temas_abordados: Optional[str] = None
    etiquetas: List[EtiquetaTextosCreate] = []

    @field_validator("estudiante_id", "usuario_id", mode="before")
    @classmethod
    def ids_as_str(cls, value: Any) -> Any:
        return _id_to_str(value)

    @field_validator("fecha")
    @classmethod
    def fecha_utc(cls, value: datetime) -> datetime:
        # Se almacena siempre en UTC
        return ensure_utc(value)


class EntrevistaUpdate(BaseModel):
    """Request para actualizar una entrevista (parcial)"""
    usuario_id: Optional[str] = Field(None, validation_alias=AliasChoices("id_usuario", "usuario_id"))
    fecha: Optional[datetime] = None
    nombre_tutor: Optional[str] = None
    anio: Optional[int] = Field(None, ge=1900, le=2200, validation_alias=AliasChoices("año", "anio"))
    numero_entrevista: Optional[int] = Field(None, ge=1)
    duracion_minutos: Optional[int] = Field(None, ge=0)
    tipo_entrevista: Optional[str] = None
    estado: Optional[str] = None
    observaciones: Optional[str] = None
    temas_abordados: Optional[str] = None

    @field_validator("usuario_id", mode="before")
    @classmethod
    def ids_as_str(cls, value: Any) -> Any:
        return _id_to_str(value)

    @field_validator("fecha")
    @classmethod
    def fecha_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None


class TextoCreate(BaseModel):
    """Request para agregar un texto a una entrevista"""
    nombre_etiqueta: str = Field(..., min_length=1, max_length=MAX_NOMBRE_ETIQUETA)
    contenido: str
    contexto: Optional[str] = None

    @field_validator("contenido")
    @classmethod
    def contenido_no_vacio(cls, value: str) -> str:
        if not value.strip():
            raise ValueError(MSG_CONTENIDO_VACIO)
        return value.strip()


class TextoUpdate(BaseModel):
    """Request para editar un texto (parcial)"""
    nombre_etiqueta: Optional[str] = Field(None, min_length=1, max_length=MAX_NOMBRE_ETIQUETA)
    contenido: Optional[str] = None
    contexto: Optional[str] = None

    @field_validator("contenido")
    @classmethod
    def contenido_no_vacio(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError(MSG_CONTENIDO_VACIO)
        return value


# =============================================================================
# RESPONSES
# =============================================================================

class EtiquetaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    nombre_etiqueta: str
    descripcion: Optional[str] = None


class EntrevistaResumen(BaseModel):
    """Metadatos de la entrevista embebidos en cada texto del historial"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    estudiante_id: str
    fecha: datetime
    anio: int
    numero_entrevista: int

    @field_validator("fecha")
    @classmethod
    def fecha_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class TextoEnEntrevistaResponse(BaseModel):
    """Texto dentro de una entrevista (sin repetir la entrevista)"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    entrevista_id: str
    nombre_etiqueta: str
    contenido: str
    fecha: datetime
    contexto: Optional[str] = None
    etiqueta: Optional[EtiquetaResponse] = None

    @field_validator("fecha")
    @classmethod
    def fecha_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class TextoResponse(TextoEnEntrevistaResponse):
    """Texto con su etiqueta y el resumen de la entrevista de origen"""
    entrevista: Optional[EntrevistaResumen] = None


class EntrevistaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    estudiante_id: str
    usuario_id: Optional[str] = None
    fecha: datetime
    nombre_tutor: Optional[str] = None
    anio: int
    numero_entrevista: int
    duracion_minutos: Optional[int] = None
    tipo_entrevista: Optional[str] = None
    estado: Optional[str] = None
    observaciones: Optional[str] = None
    temas_abordados: Optional[str] = None
    textos: List[TextoEnEntrevistaResponse] = []

    @field_validator("fecha")
    @classmethod
    def fecha_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
