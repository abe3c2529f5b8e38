"""
Servicio de entrevistas y su historial de textos por etiqueta.

Orquesta los tres repositorios y traduce las condiciones de negocio
(entrevista inexistente, tupla duplicada, contenido vacío) a las
excepciones de la API.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..api.exceptions import (
    DatabaseOperationError,
    DuplicateEntrevistaError,
    EntrevistaNotFoundError,
    InvalidTextoError,
    TextoNotFoundError,
)
from ..api.schemas.entrevistas import EntrevistaCreate, EtiquetaTextosCreate
from ..core.constants import MSG_CONTENIDO_VACIO
from ..database.models import EntrevistaDB, EtiquetaDB, TextoDB
from ..database.repositories import EntrevistaRepository, EtiquetaRepository, TextoRepository

logger = logging.getLogger(__name__)


@contextmanager
def _operacion_bd(operacion: str):
    """
    Traduce fallas de la base de datos a DatabaseOperationError (500).

    IntegrityError se deja pasar: el servicio la convierte en errores de
    negocio (tupla duplicada).
    """
    try:
        yield
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database operation failed: {operacion}", extra={"operacion": operacion, "error": str(e)})
        raise DatabaseOperationError(operacion, str(e)) from e


class EntrevistaService:
    """Operaciones de entrevistas, etiquetas y textos sobre una sesión de BD"""

    def __init__(self, db_session: Session):
        self.db = db_session
        self.entrevistas = EntrevistaRepository(db_session)
        self.etiquetas = EtiquetaRepository(db_session)
        self.textos = TextoRepository(db_session)

    # ------------------------------------------------------------------
    # Entrevistas
    # ------------------------------------------------------------------

    def create(self, datos: EntrevistaCreate) -> EntrevistaDB:
        """
        Crea una entrevista y, si vienen, sus etiquetas y textos iniciales.

        Raises:
            DuplicateEntrevistaError: si ya existe (estudiante, año, número)
        """
        if self.entrevistas.exists_for_sequence(datos.estudiante_id, datos.anio, datos.numero_entrevista):
            raise DuplicateEntrevistaError(datos.estudiante_id, datos.anio, datos.numero_entrevista)

        try:
            with _operacion_bd("create_entrevista"):
                entrevista = self.entrevistas.create(
                    estudiante_id=datos.estudiante_id,
                    usuario_id=datos.usuario_id,
                    fecha=datos.fecha,
                    nombre_tutor=datos.nombre_tutor,
                    anio=datos.anio,
                    numero_entrevista=datos.numero_entrevista,
                    duracion_minutos=datos.duracion_minutos,
                    tipo_entrevista=datos.tipo_entrevista,
                    estado=datos.estado,
                    observaciones=datos.observaciones,
                    temas_abordados=datos.temas_abordados,
                )
        except IntegrityError:
            # Otro request creó la misma tupla entre la verificación y el insert
            raise DuplicateEntrevistaError(datos.estudiante_id, datos.anio, datos.numero_entrevista)

        if datos.etiquetas:
            with _operacion_bd("create_textos_iniciales"):
                self._procesar_textos(entrevista.id, datos.etiquetas)

        # Recargar con textos y etiquetas
        return self.entrevistas.get_by_id(entrevista.id, load_textos=True)

    def _procesar_textos(self, entrevista_id: str, etiquetas: List[EtiquetaTextosCreate]) -> None:
        for etiqueta_datos in etiquetas:
            etiqueta = self.etiquetas.get_or_create(etiqueta_datos.nombre_etiqueta)
            for texto in etiqueta_datos.textos:
                self.textos.create(
                    entrevista_id=entrevista_id,
                    nombre_etiqueta=etiqueta.nombre_etiqueta,
                    contenido=texto.contenido,
                    contexto=texto.contexto,
                    fecha=texto.fecha,
                )

    def find_all(self) -> List[EntrevistaDB]:
        return self.entrevistas.get_all()

    def find_by_estudiante(self, estudiante_id: str) -> List[EntrevistaDB]:
        return self.entrevistas.get_by_estudiante(estudiante_id)

    def find_one(self, entrevista_id: str) -> EntrevistaDB:
        entrevista = self.entrevistas.get_by_id(entrevista_id, load_textos=True)
        if entrevista is None:
            raise EntrevistaNotFoundError(entrevista_id)
        return entrevista

    def update(self, entrevista_id: str, cambios: Dict[str, Any]) -> EntrevistaDB:
        """
        Actualización parcial. Si cambia año o número, se vuelve a validar
        la unicidad de la tupla contra las demás entrevistas del estudiante.
        """
        entrevista = self.find_one(entrevista_id)
        # Las columnas obligatorias no aceptan null en una actualización parcial
        cambios = {
            campo: valor for campo, valor in cambios.items()
            if valor is not None or campo not in ("fecha", "anio", "numero_entrevista")
        }

        anio = cambios.get("anio", entrevista.anio)
        numero = cambios.get("numero_entrevista", entrevista.numero_entrevista)
        if (anio, numero) != (entrevista.anio, entrevista.numero_entrevista):
            if self.entrevistas.exists_for_sequence(
                entrevista.estudiante_id, anio, numero, exclude_id=entrevista.id
            ):
                raise DuplicateEntrevistaError(entrevista.estudiante_id, anio, numero)

        try:
            with _operacion_bd("update_entrevista"):
                return self.entrevistas.update(entrevista, cambios)
        except IntegrityError:
            raise DuplicateEntrevistaError(entrevista.estudiante_id, anio, numero)

    def delete(self, entrevista_id: str) -> None:
        entrevista = self.find_one(entrevista_id)
        with _operacion_bd("delete_entrevista"):
            self.entrevistas.delete(entrevista)

    # ------------------------------------------------------------------
    # Textos
    # ------------------------------------------------------------------

    def get_textos_by_entrevista(self, entrevista_id: str) -> List[TextoDB]:
        return self.textos.get_by_entrevista(entrevista_id)

    def get_textos_by_estudiante_and_etiqueta(
        self, estudiante_id: str, nombre_etiqueta: str
    ) -> List[TextoDB]:
        """
        Historial completo de un estudiante para una etiqueta, a través de
        todas sus entrevistas, del más reciente al más antiguo.

        Un estudiante sin entrevistas (o desconocido) devuelve [] sin error.
        La etiqueta se compara de forma exacta, sin normalizar mayúsculas
        ni espacios.
        """
        entrevista_ids = self.entrevistas.get_ids_by_estudiante(estudiante_id)
        if not entrevista_ids:
            return []

        textos = self.textos.get_by_entrevistas_and_etiqueta(entrevista_ids, nombre_etiqueta)
        logger.debug(
            "Historial de textos cargado",
            extra={
                "estudiante_id": estudiante_id,
                "nombre_etiqueta": nombre_etiqueta,
                "entrevistas": len(entrevista_ids),
                "textos": len(textos),
            },
        )
        return textos

    def add_texto(
        self,
        entrevista_id: str,
        nombre_etiqueta: str,
        contenido: str,
        contexto: Optional[str] = None,
    ) -> TextoDB:
        """
        Agrega un texto a una entrevista con el timestamp actual del servidor.

        La entrevista se verifica antes de tocar la etiqueta: un id inexistente
        nunca crea etiquetas nuevas.

        Raises:
            EntrevistaNotFoundError: si la entrevista no existe
            InvalidTextoError: si el contenido o la etiqueta están vacíos
        """
        if self.entrevistas.get_by_id(entrevista_id) is None:
            raise EntrevistaNotFoundError(entrevista_id)

        contenido = (contenido or "").strip()
        if not contenido:
            raise InvalidTextoError(MSG_CONTENIDO_VACIO, {"entrevista_id": entrevista_id})
        if not nombre_etiqueta:
            raise InvalidTextoError("La etiqueta es obligatoria", {"entrevista_id": entrevista_id})

        with _operacion_bd("add_texto"):
            etiqueta = self.etiquetas.get_or_create(nombre_etiqueta)
            return self.textos.create(
                entrevista_id=entrevista_id,
                nombre_etiqueta=etiqueta.nombre_etiqueta,
                contenido=contenido,
                contexto=contexto,
            )

    def _get_texto_de_entrevista(self, entrevista_id: str, texto_id: str) -> TextoDB:
        texto = self.textos.get_by_id(texto_id)
        if texto is None or texto.entrevista_id != entrevista_id:
            raise TextoNotFoundError(texto_id, entrevista_id)
        return texto

    def update_texto(
        self,
        entrevista_id: str,
        texto_id: str,
        contenido: Optional[str] = None,
        contexto: Optional[str] = None,
        nombre_etiqueta: Optional[str] = None,
    ) -> TextoDB:
        texto = self._get_texto_de_entrevista(entrevista_id, texto_id)

        if contenido is not None:
            contenido = contenido.strip()
            if not contenido:
                raise InvalidTextoError(MSG_CONTENIDO_VACIO, {"texto_id": texto_id})
        if nombre_etiqueta is not None and not nombre_etiqueta:
            raise InvalidTextoError("La etiqueta es obligatoria", {"texto_id": texto_id})

        with _operacion_bd("update_texto"):
            if nombre_etiqueta is not None:
                nombre_etiqueta = self.etiquetas.get_or_create(nombre_etiqueta).nombre_etiqueta
            return self.textos.update(
                texto, contenido=contenido, contexto=contexto, nombre_etiqueta=nombre_etiqueta
            )

    def delete_texto(self, entrevista_id: str, texto_id: str) -> None:
        texto = self._get_texto_de_entrevista(entrevista_id, texto_id)
        with _operacion_bd("delete_texto"):
            self.textos.delete(texto)

    # ------------------------------------------------------------------
    # Etiquetas
    # ------------------------------------------------------------------

    def list_etiquetas(self) -> List[EtiquetaDB]:
        return self.etiquetas.get_all()
