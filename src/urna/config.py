# Config Module
# AUTO-DOC-INDEX
#
# ES: Índice rápido
#   1) Propósito del módulo
#   2) Componentes principales
#   3) Puntos de extensión
#
# EN: Quick index
#   1) Module purpose
#   2) Main components
#   3) Extension points
#
# Secciones / Sections:
#   - Configuración / Configuration
#   - Lógica principal / Core logic
#   - Integraciones / Integrations

"""Configuración validada de Urna.

Validated Urna configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.identity import ZERO_ADDRESS

_ENV_PATH = Path(".env")
_ENV_LOCAL_PATH = Path(".env.local")


class LedgerSettings(BaseSettings):
    """Variables de entorno y archivo .env para Urna.

    English: Environment variables and .env file for Urna.
    """

    model_config = SettingsConfigDict(
        env_prefix="URNA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    STORAGE_PATH: Optional[Path] = None
    NULL_IDENTITIES: List[str] = Field(default_factory=lambda: [ZERO_ADDRESS])

    @field_validator("LOG_LEVEL")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"Unknown log level: {value}")
        return normalized

    def validate_paths(self) -> None:
        """/** Valida que las rutas configuradas existan. / Validate that configured paths exist. **/"""
        if self.STORAGE_PATH is None:
            return
        if not self.STORAGE_PATH.exists():
            raise ValueError(f"STORAGE_PATH does not exist: {self.STORAGE_PATH}")
        if not self.STORAGE_PATH.is_dir():
            raise ValueError(f"STORAGE_PATH is not a directory: {self.STORAGE_PATH}")


def load_config() -> LedgerSettings:
    """/** Carga y valida configuración, fallando con detalle. / Load and validate configuration, failing with details. **/"""
    load_dotenv(_ENV_PATH, override=False)
    load_dotenv(_ENV_LOCAL_PATH, override=False)
    try:
        settings = LedgerSettings()
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
    settings.validate_paths()
    return settings
