"""
Cliente de la API y lógica del editor de notas
"""
from .http import ApiClientError, EntrevistaClient
from .note_editor import EntrevistaInfo, Nota, NoteEditor, filtrar_notas

__all__ = [
    "ApiClientError",
    "EntrevistaClient",
    "EntrevistaInfo",
    "Nota",
    "NoteEditor",
    "filtrar_notas",
]
