"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del repositorio.
- Agrupa ajustes por área: App, CORS, Mongo, Servidor.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field
from pathlib import Path

# Resuelve el .env ubicado en la raíz del repo (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "User API"
    api_prefix: str = ""
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    cors_allow_any: bool = False  # Permite todos los orígenes (usa con cuidado)

    # Mongo
    # La cadena de conexión incluye host, credenciales y (opcional) la base.
    mongo_uri: str = Field(
        "mongodb://localhost:27017/rustDB",
        validation_alias=AliasChoices("MONGOURI", "MONGO_URI"),
    )
    mongo_db: str = "rustDB"  # se usa solo si la URI no nombra una base
    mongo_collection: str = "User"
    mongo_timeout_ms: int = 15000
    mongo_tls: bool = False
    # TLS relax options (dev only)
    mongo_tls_insecure: bool = False
    mongo_tls_allow_invalid_hostnames: bool = False

    # Servidor
    host: str = "0.0.0.0"
    port: int = 8080

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref or pref == "/":
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if pref.endswith('/'):
            pref = pref.rstrip('/')
        return pref

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
        populate_by_name=True,
    )


settings = Settings()
