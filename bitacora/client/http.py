"""
Cliente HTTP de la API de entrevistas (httpx)

Una llamada por acción, sin reintentos ni caché. Cualquier respuesta
no 2xx se convierte en ApiClientError con el mensaje que envía la API.
"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..core.config import settings

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """Error devuelto por la API (o de red, con status_code None)"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class EntrevistaClient:
    """
    Servicio de entrevistas del lado cliente.

    Puede recibir un httpx.AsyncClient ya construido (tests con
    MockTransport, o un cliente compartido); si no, crea uno propio
    contra settings.api_base_url y lo cierra en aclose().
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.http_timeout_seconds,
            headers={"Content-Type": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "EntrevistaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Network error calling API: {e}", extra={"method": method, "path": path})
            raise ApiClientError(f"Error de red: {e}") from e

        if response.is_error:
            message, error_code, details = _error_message(response)
            raise ApiClientError(
                message, status_code=response.status_code, error_code=error_code, details=details
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Entrevistas
    # ------------------------------------------------------------------

    async def get_all(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/entrevistas")

    async def get_by_id(self, entrevista_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/entrevistas/{_segmento(entrevista_id)}")

    async def get_by_estudiante(self, estudiante_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/entrevistas/estudiante/{_segmento(estudiante_id)}")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/entrevistas", json=data)

    async def update(self, entrevista_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/entrevistas/{_segmento(entrevista_id)}", json=data)

    async def delete(self, entrevista_id: str) -> None:
        await self._request("DELETE", f"/entrevistas/{_segmento(entrevista_id)}")

    # ------------------------------------------------------------------
    # Textos
    # ------------------------------------------------------------------

    async def get_textos(self, entrevista_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/entrevistas/{_segmento(entrevista_id)}/textos")

    async def add_texto(
        self,
        entrevista_id: str,
        nombre_etiqueta: str,
        contenido: str,
        contexto: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"nombre_etiqueta": nombre_etiqueta, "contenido": contenido}
        if contexto is not None:
            payload["contexto"] = contexto
        return await self._request("POST", f"/entrevistas/{_segmento(entrevista_id)}/textos", json=payload)

    async def update_texto(self, entrevista_id: str, texto_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        path = f"/entrevistas/{_segmento(entrevista_id)}/textos/{_segmento(texto_id)}"
        return await self._request("PATCH", path, json=data)

    async def delete_texto(self, entrevista_id: str, texto_id: str) -> None:
        path = f"/entrevistas/{_segmento(entrevista_id)}/textos/{_segmento(texto_id)}"
        await self._request("DELETE", path)

    async def get_textos_by_estudiante_and_etiqueta(
        self, estudiante_id: str, nombre_etiqueta: str
    ) -> List[Dict[str, Any]]:
        """Historial completo del estudiante para la etiqueta (todas las entrevistas)"""
        return await self._request(
            "GET",
            f"/entrevistas/estudiante/{_segmento(estudiante_id)}"
            f"/etiqueta/{_segmento(nombre_etiqueta)}/textos",
        )


def _segmento(value: str) -> str:
    # Un id nunca debe abrir un segmento de ruta nuevo
    return quote(str(value), safe="")


def _error_message(response: httpx.Response):
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}", None, None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail") or f"HTTP {response.status_code}"
        return str(message), body.get("error_code"), body.get("details")
    return f"HTTP {response.status_code}", None, None
