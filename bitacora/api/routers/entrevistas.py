"""
Router de entrevistas y sus textos

El historial por etiqueta (`/estudiante/{id}/etiqueta/{nombre}/textos`)
recorre todas las entrevistas del estudiante, no solo la abierta.
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..deps import get_entrevista_service
from ..schemas.entrevistas import (
    EntrevistaCreate,
    EntrevistaResponse,
    EntrevistaUpdate,
    TextoCreate,
    TextoResponse,
    TextoUpdate,
)
from ...services.entrevista_service import EntrevistaService

router = APIRouter(prefix="/entrevistas", tags=["Entrevistas"])


@router.post(
    "",
    response_model=EntrevistaResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear entrevista",
    description="Rechaza con 400 si ya existe la tupla (estudiante, año, número de entrevista)",
)
def create_entrevista(
    datos: EntrevistaCreate,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    return service.create(datos)


@router.get("", response_model=List[EntrevistaResponse], summary="Listar entrevistas")
def list_entrevistas(service: EntrevistaService = Depends(get_entrevista_service)):
    return service.find_all()


@router.get(
    "/estudiante/{estudiante_id}",
    response_model=List[EntrevistaResponse],
    summary="Entrevistas de un estudiante",
)
def list_entrevistas_estudiante(
    estudiante_id: str,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    return service.find_by_estudiante(estudiante_id)


@router.get(
    "/estudiante/{estudiante_id}/etiqueta/{nombre_etiqueta:path}/textos",
    response_model=List[TextoResponse],
    summary="Historial de textos de un estudiante por etiqueta",
    description=(
        "Todos los textos de la etiqueta en todas las entrevistas del estudiante, "
        "del más reciente al más antiguo. Un estudiante sin entrevistas devuelve []."
    ),
)
def get_textos_estudiante_etiqueta(
    estudiante_id: str,
    nombre_etiqueta: str,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    # Starlette ya entrega el path decodificado; el convertidor :path admite '/' codificado
    return service.get_textos_by_estudiante_and_etiqueta(estudiante_id, nombre_etiqueta)


@router.get("/{entrevista_id}", response_model=EntrevistaResponse, summary="Obtener entrevista")
def get_entrevista(
    entrevista_id: str,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    return service.find_one(entrevista_id)


@router.patch("/{entrevista_id}", response_model=EntrevistaResponse, summary="Actualizar entrevista")
def update_entrevista(
    entrevista_id: str,
    datos: EntrevistaUpdate,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    return service.update(entrevista_id, datos.model_dump(exclude_unset=True))


@router.delete(
    "/{entrevista_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Eliminar entrevista (y sus textos)",
)
def delete_entrevista(
    entrevista_id: str,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    service.delete(entrevista_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{entrevista_id}/textos",
    response_model=List[TextoResponse],
    summary="Textos de una entrevista",
)
def get_textos_entrevista(
    entrevista_id: str,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    return service.get_textos_by_entrevista(entrevista_id)


@router.post(
    "/{entrevista_id}/textos",
    response_model=TextoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Agregar texto a una entrevista",
    description="Crea la etiqueta si no existe. 404 si la entrevista no existe.",
)
def add_texto(
    entrevista_id: str,
    datos: TextoCreate,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    return service.add_texto(
        entrevista_id,
        nombre_etiqueta=datos.nombre_etiqueta,
        contenido=datos.contenido,
        contexto=datos.contexto,
    )


@router.patch(
    "/{entrevista_id}/textos/{texto_id}",
    response_model=TextoResponse,
    summary="Editar texto",
)
def update_texto(
    entrevista_id: str,
    texto_id: str,
    datos: TextoUpdate,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    return service.update_texto(
        entrevista_id,
        texto_id,
        contenido=datos.contenido,
        contexto=datos.contexto,
        nombre_etiqueta=datos.nombre_etiqueta,
    )


@router.delete(
    "/{entrevista_id}/textos/{texto_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Eliminar texto",
)
def delete_texto(
    entrevista_id: str,
    texto_id: str,
    service: EntrevistaService = Depends(get_entrevista_service),
):
    service.delete_texto(entrevista_id, texto_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
