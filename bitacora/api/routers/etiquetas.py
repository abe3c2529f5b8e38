"""
Router de etiquetas (solo lectura: se crean de forma perezosa al guardar textos)
"""
from typing import List

from fastapi import APIRouter, Depends

from ..deps import get_entrevista_service
from ..schemas.entrevistas import EtiquetaResponse
from ...services.entrevista_service import EntrevistaService

router = APIRouter(prefix="/etiquetas", tags=["Etiquetas"])


@router.get("", response_model=List[EtiquetaResponse], summary="Listar etiquetas")
def list_etiquetas(service: EntrevistaService = Depends(get_entrevista_service)):
    return service.list_etiquetas()
