"""
Repository pattern for database operations

Provides:
- EntrevistaRepository: Manage interview sessions
- EtiquetaRepository: Manage tags (lazy insert-or-fetch)
- TextoRepository: Manage notes and the cross-interview history query

TRANSACTION MANAGEMENT:
----------------------
Individual repository methods commit immediately after each operation and
roll back on failure before re-raising. There is no transaction spanning
tag creation and note creation: EtiquetaRepository.get_or_create() is
idempotent on its own, so a failed note insert leaves at most an unused tag.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from sqlalchemy import desc
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..core.constants import utc_now
from .models import EntrevistaDB, EtiquetaDB, TextoDB

logger = logging.getLogger(__name__)

# Campos de EntrevistaDB que se pueden modificar después de crearla
ENTREVISTA_UPDATABLE_FIELDS = (
    "usuario_id",
    "fecha",
    "nombre_tutor",
    "anio",
    "numero_entrevista",
    "duracion_minutos",
    "tipo_entrevista",
    "estado",
    "observaciones",
    "temas_abordados",
)


class EntrevistaRepository:
    """Repository for interview operations"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def create(
        self,
        estudiante_id: str,
        fecha: datetime,
        anio: int,
        numero_entrevista: int,
        usuario_id: Optional[str] = None,
        nombre_tutor: Optional[str] = None,
        duracion_minutos: Optional[int] = None,
        tipo_entrevista: Optional[str] = None,
        estado: Optional[str] = None,
        observaciones: Optional[str] = None,
        temas_abordados: Optional[str] = None,
    ) -> EntrevistaDB:
        """
        Create a new interview.

        Raises:
            IntegrityError: If (estudiante_id, anio, numero_entrevista) already exists
        """
        try:
            entrevista = EntrevistaDB(
                id=str(uuid4()),
                estudiante_id=estudiante_id,
                usuario_id=usuario_id,
                fecha=fecha,
                nombre_tutor=nombre_tutor,
                anio=anio,
                numero_entrevista=numero_entrevista,
                duracion_minutos=duracion_minutos,
                tipo_entrevista=tipo_entrevista,
                estado=estado,
                observaciones=observaciones,
                temas_abordados=temas_abordados,
            )
            self.db.add(entrevista)
            self.db.commit()
            self.db.refresh(entrevista)

            logger.info(
                "Entrevista created",
                extra={
                    "entrevista_id": entrevista.id,
                    "estudiante_id": estudiante_id,
                    "anio": anio,
                    "numero_entrevista": numero_entrevista,
                },
            )
            return entrevista
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create entrevista: {e}", extra={
                "estudiante_id": estudiante_id,
                "anio": anio,
                "numero_entrevista": numero_entrevista,
            })
            raise

    def get_by_id(self, entrevista_id: str, load_textos: bool = False) -> Optional[EntrevistaDB]:
        """Get interview by ID, optionally eager-loading its notes and their tags"""
        query = self.db.query(EntrevistaDB)
        if load_textos:
            query = query.options(selectinload(EntrevistaDB.textos).joinedload(TextoDB.etiqueta))
        return query.filter(EntrevistaDB.id == entrevista_id).first()

    def get_all(self) -> List[EntrevistaDB]:
        """All interviews, most recent first"""
        return (
            self.db.query(EntrevistaDB)
            .options(selectinload(EntrevistaDB.textos).joinedload(TextoDB.etiqueta))
            .order_by(desc(EntrevistaDB.fecha))
            .all()
        )

    def get_by_estudiante(self, estudiante_id: str) -> List[EntrevistaDB]:
        """Interviews of one student, most recent first"""
        return (
            self.db.query(EntrevistaDB)
            .options(selectinload(EntrevistaDB.textos).joinedload(TextoDB.etiqueta))
            .filter(EntrevistaDB.estudiante_id == estudiante_id)
            .order_by(desc(EntrevistaDB.fecha))
            .all()
        )

    def get_ids_by_estudiante(self, estudiante_id: str) -> List[str]:
        """
        Only the identifiers of a student's interviews.

        An unknown student simply has no interviews: returns [].
        """
        rows = (
            self.db.query(EntrevistaDB.id)
            .filter(EntrevistaDB.estudiante_id == estudiante_id)
            .all()
        )
        return [row.id for row in rows]

    def exists_for_sequence(
        self,
        estudiante_id: str,
        anio: int,
        numero_entrevista: int,
        exclude_id: Optional[str] = None,
    ) -> bool:
        """Check if the (student, year, sequence number) tuple is already taken"""
        query = self.db.query(EntrevistaDB.id).filter(
            EntrevistaDB.estudiante_id == estudiante_id,
            EntrevistaDB.anio == anio,
            EntrevistaDB.numero_entrevista == numero_entrevista,
        )
        if exclude_id is not None:
            query = query.filter(EntrevistaDB.id != exclude_id)
        return query.first() is not None

    def update(self, entrevista: EntrevistaDB, changes: Dict[str, Any]) -> EntrevistaDB:
        """Apply a partial update. Unknown or immutable keys are ignored."""
        try:
            for field, value in changes.items():
                if field in ENTREVISTA_UPDATABLE_FIELDS:
                    setattr(entrevista, field, value)
            entrevista.updated_at = utc_now()
            self.db.commit()
            self.db.refresh(entrevista)
            return entrevista
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update entrevista: {e}", extra={"entrevista_id": entrevista.id})
            raise

    def delete(self, entrevista: EntrevistaDB) -> None:
        """Delete an interview and, by cascade, its notes"""
        try:
            self.db.delete(entrevista)
            self.db.commit()
            logger.info("Entrevista deleted", extra={"entrevista_id": entrevista.id})
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete entrevista: {e}", extra={"entrevista_id": entrevista.id})
            raise


class EtiquetaRepository:
    """Repository for tag operations"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def get_by_nombre(self, nombre_etiqueta: str) -> Optional[EtiquetaDB]:
        """Get tag by exact (case-sensitive) name"""
        return (
            self.db.query(EtiquetaDB)
            .filter(EtiquetaDB.nombre_etiqueta == nombre_etiqueta)
            .first()
        )

    def get_all(self) -> List[EtiquetaDB]:
        return self.db.query(EtiquetaDB).order_by(EtiquetaDB.nombre_etiqueta).all()

    def get_or_create(self, nombre_etiqueta: str) -> EtiquetaDB:
        """
        Insert-or-fetch a tag by name.

        Relies on the unique constraint on nombre_etiqueta instead of a
        check-then-insert, so two concurrent writers with the same new name
        end up sharing one row. PostgreSQL and SQLite use
        INSERT ... ON CONFLICT DO NOTHING; other dialects insert inside a
        SAVEPOINT and fall back to a re-read on IntegrityError.
        """
        etiqueta = self.get_by_nombre(nombre_etiqueta)
        if etiqueta is not None:
            return etiqueta

        try:
            dialect = self.db.get_bind().dialect.name
            if dialect in ("postgresql", "sqlite"):
                self._insert_ignore_conflict(dialect, nombre_etiqueta)
            else:
                self._insert_in_savepoint(nombre_etiqueta)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create etiqueta: {e}", extra={"nombre_etiqueta": nombre_etiqueta})
            raise

        etiqueta = self.get_by_nombre(nombre_etiqueta)
        logger.info("Etiqueta ensured", extra={"nombre_etiqueta": nombre_etiqueta, "etiqueta_id": etiqueta.id})
        return etiqueta

    def _insert_ignore_conflict(self, dialect: str, nombre_etiqueta: str) -> None:
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        now = utc_now()
        stmt = (
            insert(EtiquetaDB)
            .values(
                id=str(uuid4()),
                nombre_etiqueta=nombre_etiqueta,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["nombre_etiqueta"])
        )
        self.db.execute(stmt)

    def _insert_in_savepoint(self, nombre_etiqueta: str) -> None:
        try:
            with self.db.begin_nested():
                self.db.add(EtiquetaDB(id=str(uuid4()), nombre_etiqueta=nombre_etiqueta))
        except IntegrityError:
            # Otro escritor la creó primero; el SAVEPOINT ya fue revertido
            logger.debug("Etiqueta created concurrently", extra={"nombre_etiqueta": nombre_etiqueta})


class TextoRepository:
    """Repository for note operations"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def create(
        self,
        entrevista_id: str,
        nombre_etiqueta: str,
        contenido: str,
        contexto: Optional[str] = None,
        fecha: Optional[datetime] = None,
    ) -> TextoDB:
        """
        Create a note.

        Args:
            fecha: Timestamp of the note; defaults to the current server time (UTC)
        """
        try:
            texto = TextoDB(
                id=str(uuid4()),
                entrevista_id=entrevista_id,
                nombre_etiqueta=nombre_etiqueta,
                contenido=contenido,
                contexto=contexto,
                fecha=fecha or utc_now(),
            )
            self.db.add(texto)
            self.db.commit()
            self.db.refresh(texto)

            logger.info(
                "Texto created",
                extra={
                    "texto_id": texto.id,
                    "entrevista_id": entrevista_id,
                    "nombre_etiqueta": nombre_etiqueta,
                },
            )
            return texto
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create texto: {e}", extra={
                "entrevista_id": entrevista_id,
                "nombre_etiqueta": nombre_etiqueta,
            })
            raise

    def get_by_id(self, texto_id: str) -> Optional[TextoDB]:
        return (
            self.db.query(TextoDB)
            .options(joinedload(TextoDB.etiqueta), joinedload(TextoDB.entrevista))
            .filter(TextoDB.id == texto_id)
            .first()
        )

    def get_by_entrevista(self, entrevista_id: str) -> List[TextoDB]:
        """Notes of a single interview, most recent first"""
        return (
            self.db.query(TextoDB)
            .options(joinedload(TextoDB.etiqueta), joinedload(TextoDB.entrevista))
            .filter(TextoDB.entrevista_id == entrevista_id)
            .order_by(desc(TextoDB.fecha))
            .all()
        )

    def get_by_entrevistas_and_etiqueta(
        self, entrevista_ids: Sequence[str], nombre_etiqueta: str
    ) -> List[TextoDB]:
        """
        Notes tagged `nombre_etiqueta` (exact match) within a set of interviews.

        Tag and interview are eager-loaded in the same query; ordered by
        note timestamp descending.
        """
        if not entrevista_ids:
            return []
        return (
            self.db.query(TextoDB)
            .options(joinedload(TextoDB.etiqueta), joinedload(TextoDB.entrevista))
            .filter(TextoDB.entrevista_id.in_(list(entrevista_ids)))
            .filter(TextoDB.nombre_etiqueta == nombre_etiqueta)
            .order_by(desc(TextoDB.fecha))
            .all()
        )

    def update(
        self,
        texto: TextoDB,
        contenido: Optional[str] = None,
        contexto: Optional[str] = None,
        nombre_etiqueta: Optional[str] = None,
    ) -> TextoDB:
        """Partial update; None leaves a field untouched"""
        try:
            if contenido is not None:
                texto.contenido = contenido
            if contexto is not None:
                texto.contexto = contexto
            if nombre_etiqueta is not None:
                texto.nombre_etiqueta = nombre_etiqueta
            texto.updated_at = utc_now()
            self.db.commit()
            self.db.refresh(texto)
            return texto
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update texto: {e}", extra={"texto_id": texto.id})
            raise

    def delete(self, texto: TextoDB) -> None:
        try:
            self.db.delete(texto)
            self.db.commit()
            logger.info("Texto deleted", extra={"texto_id": texto.id})
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete texto: {e}", extra={"texto_id": texto.id})
            raise
