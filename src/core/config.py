"""Configuración del Core.

- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los adaptadores (fly, HTTP) leen la configuración de forma consistente.

La petición del recurso (target, equipos, insecure) NO vive aquí: llega por
stdin en cada ejecución. Aquí solo hay ajustes del entorno de ejecución.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "pipeline-resource"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "pipeline-resource"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "pipeline-resource"
    return Path.home() / ".config" / "pipeline-resource"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación."""

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_RESOURCE_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    fly_binary_path: str = Field(
        default="fly",
        min_length=1,
        description="Ruta (o nombre en PATH) del binario fly.",
    )
    fly_target_alias: str = Field(
        default="pipeline-resource-target",
        min_length=1,
        description="Alias con el que fly guarda el target autenticado.",
    )
    fly_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por invocación de fly (segundos). None = sin límite.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request a la API (segundos).",
    )
    user_agent: str = Field(
        default="pipeline-resource/0.1",
        min_length=1,
        description="User-Agent para la API.",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )
    snapshot_extension: str = Field(
        default="yml",
        min_length=1,
        description="Extensión de los ficheros de configuración escritos.",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @field_validator("snapshot_extension")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        return value.strip().lstrip(".")
