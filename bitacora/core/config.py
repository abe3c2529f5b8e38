"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del proyecto.
- Agrupa ajustes por área: App, CORS, Base de datos, Logging, Cliente HTTP.
"""
from pathlib import Path
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del proyecto (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Variables de configuración con valores por defecto para desarrollo local.

    Los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "Bitácora de Entrevistas API"
    api_prefix: str = ""

    # CORS (front-end Vite/React en localhost)
    cors_origins: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    cors_allow_any: bool = False

    # Base de datos
    database_url: str = Field(
        "sqlite:///./bitacora.db",
        validation_alias=AliasChoices("BITACORA_DATABASE_URL", "DATABASE_URL"),
    )
    database_echo: bool = False

    # Logging
    log_level: str = "INFO"

    # Cliente HTTP (editor de notas)
    api_base_url: str = "http://localhost:8000"
    http_timeout_seconds: float = 15.0

    # Zona horaria local para filtros y etiquetas de fecha
    timezone: str = Field(
        "America/Santiago",
        validation_alias=AliasChoices("BITACORA_TIMEZONE", "TIMEZONE"),
    )

    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref or pref == "/":
            return ""
        if not pref.startswith("/"):
            pref = "/" + pref
        return pref.rstrip("/")

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
