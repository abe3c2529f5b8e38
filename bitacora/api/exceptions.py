"""
Excepciones personalizadas para la API REST
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from ..core.constants import MSG_CONTENIDO_VACIO, MSG_ENTREVISTA_NO_ENCONTRADA, MSG_TEXTO_NO_ENCONTRADO


class BitacoraAPIException(HTTPException):
    """Excepción base para la API de la bitácora"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: Optional[Dict[str, str]] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.extra = extra or {}


class EntrevistaNotFoundError(BitacoraAPIException):
    """Entrevista no encontrada"""

    def __init__(self, entrevista_id: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MSG_ENTREVISTA_NO_ENCONTRADA,
            error_code="ENTREVISTA_NOT_FOUND",
            extra={"entrevista_id": entrevista_id}
        )


class TextoNotFoundError(BitacoraAPIException):
    """Texto no encontrado (o no pertenece a la entrevista indicada)"""

    def __init__(self, texto_id: str, entrevista_id: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MSG_TEXTO_NO_ENCONTRADO,
            error_code="TEXTO_NOT_FOUND",
            extra={"texto_id": texto_id, "entrevista_id": entrevista_id}
        )


class DuplicateEntrevistaError(BitacoraAPIException):
    """Ya existe una entrevista con la misma tupla (estudiante, año, número)"""

    def __init__(self, estudiante_id: str, anio: int, numero_entrevista: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ya existe la entrevista {numero_entrevista} para el año {anio}",
            error_code="ENTREVISTA_DUPLICADA",
            extra={
                "estudiante_id": estudiante_id,
                "anio": anio,
                "numero_entrevista": numero_entrevista,
            }
        )


class InvalidTextoError(BitacoraAPIException):
    """Texto inválido (contenido vacío, etiqueta vacía, etc.)"""

    def __init__(self, message: str = MSG_CONTENIDO_VACIO, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
            error_code="TEXTO_INVALIDO",
            extra=details or {}
        )


class DatabaseOperationError(BitacoraAPIException):
    """Error en operación de base de datos"""

    def __init__(self, operation: str, details: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database operation failed: {operation}",
            error_code="DATABASE_ERROR",
            extra={"operation": operation, "details": details}
        )
