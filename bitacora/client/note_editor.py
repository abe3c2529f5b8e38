"""
Editor de notas por etiqueta (lógica de presentación)

Carga el historial completo de un estudiante para la etiqueta activa,
filtra en memoria por texto y fecha, y guarda nuevas notas en la
entrevista abierta.

- Los errores de carga se registran en el log; la lista queda como estaba.
- Cada carga lleva un token creciente: solo se aplica la respuesta de la
  última carga emitida, aunque una anterior resuelva después.
- Guardar inserta la nota al inicio de la lista local sin volver a pedir
  el historial; si falla, se avisa al usuario y el borrador se conserva.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Callable, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from ..core.config import settings
from .http import EntrevistaClient

logger = logging.getLogger(__name__)

MSG_ERROR_GUARDAR = "Error al guardar la nota. Inténtalo nuevamente."
FORMATO_FECHA = "%d-%m-%Y"


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class EntrevistaInfo:
    """Entrevista de origen de una nota"""
    id: str
    fecha: Optional[datetime] = None
    numero: Optional[int] = None


@dataclass
class Nota:
    id: str
    contenido: str
    fecha: datetime
    nombre_etiqueta: Optional[str] = None
    entrevista: Optional[EntrevistaInfo] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Nota":
        entrevista = None
        raw = data.get("entrevista")
        if raw:
            entrevista = EntrevistaInfo(
                id=raw.get("id") or data.get("entrevista_id"),
                fecha=_parse_datetime(raw.get("fecha")),
                numero=raw.get("numero_entrevista"),
            )
        elif data.get("entrevista_id"):
            entrevista = EntrevistaInfo(id=data["entrevista_id"])

        return cls(
            id=data["id"],
            contenido=data["contenido"],
            fecha=_parse_datetime(data["fecha"]),
            nombre_etiqueta=data.get("nombre_etiqueta"),
            entrevista=entrevista,
        )


def filtrar_notas(
    notas: Iterable[Nota],
    texto: str = "",
    fecha: Optional[date] = None,
    tz: tzinfo = timezone.utc,
) -> List[Nota]:
    """
    Notas visibles según los filtros.

    Una nota es visible si (texto vacío o su contenido lo contiene sin
    distinguir mayúsculas) y (sin fecha o su día calendario en `tz`
    coincide). No modifica ni reordena la lista original.
    """
    needle = texto.lower() if texto else ""
    visibles = []
    for nota in notas:
        if needle and needle not in nota.contenido.lower():
            continue
        if fecha is not None and nota.fecha.astimezone(tz).date() != fecha:
            continue
        visibles.append(nota)
    return visibles


def _log_alert(message: str) -> None:
    logger.warning(message)


class NoteEditor:
    """
    Estado del editor para un par (estudiante, etiqueta).

    Args:
        client: cliente HTTP de la API
        estudiante_id: estudiante cuyo historial se muestra
        nombre_etiqueta: etiqueta activa (sección)
        entrevista_id: entrevista abierta, destino de las notas nuevas
        nombre_estudiante: usado en el contexto de las notas guardadas
        tz: zona horaria local para filtros y etiquetas de fecha
        alert: callback para avisar errores de guardado al usuario
    """

    def __init__(
        self,
        client: EntrevistaClient,
        estudiante_id: str,
        nombre_etiqueta: str,
        entrevista_id: Optional[str] = None,
        nombre_estudiante: Optional[str] = None,
        tz: Optional[str] = None,
        alert: Optional[Callable[[str], None]] = None,
    ):
        self.client = client
        self.estudiante_id = estudiante_id
        self.nombre_etiqueta = nombre_etiqueta
        self.entrevista_id = entrevista_id
        self.nombre_estudiante = nombre_estudiante
        self.tz = ZoneInfo(tz or settings.timezone)
        self._alert = alert or _log_alert

        self.notas: List[Nota] = []
        self.borrador = ""
        self.filtro_texto = ""
        self.filtro_fecha: Optional[date] = None
        self.is_loading = False
        self.is_saving = False
        self._load_token = 0

    # ------------------------------------------------------------------
    # Carga
    # ------------------------------------------------------------------

    async def cargar(self) -> bool:
        """
        Pide el historial completo para (estudiante, etiqueta).

        Returns:
            True si la respuesta se aplicó al estado; False si falló o si
            llegó tarde (ya se emitió una carga más nueva).
        """
        if not self.estudiante_id:
            return False

        self._load_token += 1
        token = self._load_token
        estudiante_id, nombre_etiqueta = self.estudiante_id, self.nombre_etiqueta
        self.is_loading = True
        try:
            textos = await self.client.get_textos_by_estudiante_and_etiqueta(estudiante_id, nombre_etiqueta)
            if token != self._load_token:
                logger.debug(
                    "Discarding stale history response",
                    extra={"token": token, "latest_token": self._load_token},
                )
                return False
            self.notas = [Nota.from_api(t) for t in textos]
            return True
        except Exception as e:
            logger.error(f"Error al cargar notas: {e}", extra={
                "estudiante_id": estudiante_id,
                "nombre_etiqueta": nombre_etiqueta,
                "status_code": getattr(e, "status_code", None),
            })
            return False
        finally:
            if token == self._load_token:
                self.is_loading = False

    async def cambiar_contexto(
        self,
        estudiante_id: Optional[str] = None,
        nombre_etiqueta: Optional[str] = None,
    ) -> bool:
        """
        Cambia estudiante y/o etiqueta y recarga el historial.

        El historial anterior se descarta antes de pedir el nuevo: si la
        carga falla, la lista queda vacía.
        """
        if estudiante_id is not None:
            self.estudiante_id = estudiante_id
        if nombre_etiqueta is not None:
            self.nombre_etiqueta = nombre_etiqueta
        self.notas = []
        return await self.cargar()

    # ------------------------------------------------------------------
    # Filtros
    # ------------------------------------------------------------------

    def notas_visibles(self) -> List[Nota]:
        return filtrar_notas(self.notas, self.filtro_texto, self.filtro_fecha, self.tz)

    def limpiar_filtros(self) -> None:
        self.filtro_texto = ""
        self.filtro_fecha = None

    @property
    def hay_filtros(self) -> bool:
        return bool(self.filtro_texto) or self.filtro_fecha is not None

    def mensaje_vacio(self) -> Optional[str]:
        """Mensaje a mostrar cuando no hay notas visibles (None si las hay)"""
        if self.notas_visibles():
            return None
        if not self.notas:
            return f"No hay notas sobre {self.nombre_etiqueta.lower()} aún"
        return "No se encontraron notas con esos criterios"

    # ------------------------------------------------------------------
    # Guardado
    # ------------------------------------------------------------------

    @property
    def can_save(self) -> bool:
        return bool(self.borrador.strip()) and bool(self.entrevista_id) and not self.is_saving

    def limpiar_borrador(self) -> None:
        self.borrador = ""

    async def guardar(self) -> Optional[Nota]:
        """
        Guarda el borrador en la entrevista activa.

        Returns:
            La nota creada, o None si no se pudo guardar (o no había nada que guardar)
        """
        if not self.can_save:
            return None

        entrevista_id = self.entrevista_id
        self.is_saving = True
        try:
            creado = await self.client.add_texto(
                entrevista_id,
                nombre_etiqueta=self.nombre_etiqueta,
                contenido=self.borrador.strip(),
                contexto=self._contexto(),
            )
        except Exception as e:
            logger.error(f"Error al guardar nota: {e}", extra={
                "entrevista_id": entrevista_id,
                "nombre_etiqueta": self.nombre_etiqueta,
                "status_code": getattr(e, "status_code", None),
            })
            self._alert(MSG_ERROR_GUARDAR)
            return None
        finally:
            self.is_saving = False

        nota = Nota.from_api(creado)
        if nota.entrevista is None:
            nota.entrevista = EntrevistaInfo(id=entrevista_id)
        self.notas.insert(0, nota)
        self.borrador = ""
        return nota

    def _contexto(self) -> Optional[str]:
        if not self.nombre_estudiante:
            return None
        return f"Entrevista con {self.nombre_estudiante}"

    # ------------------------------------------------------------------
    # Metadatos de visualización (derivados, no persistidos)
    # ------------------------------------------------------------------

    def es_entrevista_actual(self, nota: Nota) -> bool:
        return nota.entrevista is not None and nota.entrevista.id == self.entrevista_id

    def badge(self, nota: Nota) -> Optional[str]:
        """'Entrevista actual' o 'Entrevista {numero} - {fecha}' según el origen de la nota"""
        if nota.entrevista is None:
            return None
        if self.es_entrevista_actual(nota):
            return "Entrevista actual"
        partes = [f"Entrevista {nota.entrevista.numero}" if nota.entrevista.numero else "Entrevista"]
        if nota.entrevista.fecha is not None:
            partes.append(nota.entrevista.fecha.astimezone(self.tz).strftime(FORMATO_FECHA))
        return " - ".join(partes)

    def etiqueta_fecha(self, nota: Nota, ahora: Optional[datetime] = None) -> str:
        """Fecha relativa: Hoy, Ayer, Hace N días o dd-mm-aaaa"""
        ahora = ahora or datetime.now(timezone.utc)
        dias = (ahora - nota.fecha).days
        if dias == 0:
            return "Hoy"
        if dias == 1:
            return "Ayer"
        if 1 < dias < 7:
            return f"Hace {dias} días"
        return nota.fecha.astimezone(self.tz).strftime(FORMATO_FECHA)

    def etiqueta_hora(self, nota: Nota) -> str:
        return nota.fecha.astimezone(self.tz).strftime("%H:%M")
