from .entrevista_service import EntrevistaService

__all__ = ["EntrevistaService"]
