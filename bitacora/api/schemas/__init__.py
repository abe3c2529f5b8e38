from .entrevistas import (
    EntrevistaCreate,
    EntrevistaResponse,
    EntrevistaResumen,
    EntrevistaUpdate,
    EtiquetaResponse,
    EtiquetaTextosCreate,
    TextoCreate,
    TextoEnEntrevistaResponse,
    TextoInicialCreate,
    TextoResponse,
    TextoUpdate,
)

__all__ = [
    "EntrevistaCreate",
    "EntrevistaResponse",
    "EntrevistaResumen",
    "EntrevistaUpdate",
    "EtiquetaResponse",
    "EtiquetaTextosCreate",
    "TextoCreate",
    "TextoEnEntrevistaResponse",
    "TextoInicialCreate",
    "TextoResponse",
    "TextoUpdate",
]
