"""
Constantes compartidas del backend
"""
from datetime import datetime, timezone

# Mensajes de error expuestos al cliente
MSG_ENTREVISTA_NO_ENCONTRADA = "Entrevista no encontrada"
MSG_TEXTO_NO_ENCONTRADO = "Texto no encontrado"
MSG_CONTENIDO_VACIO = "El contenido del texto no puede estar vacío"

# Longitudes máximas de columnas
MAX_NOMBRE_ETIQUETA = 255
MAX_ID_LENGTH = 100


def utc_now() -> datetime:
    """Timestamp actual timezone-aware en UTC"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normaliza un datetime a UTC.

    SQLite devuelve datetimes naive aunque la columna sea timezone=True;
    se asume que siempre se almacenaron en UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
