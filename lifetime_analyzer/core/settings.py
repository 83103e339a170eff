"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


def _resolve_env_file() -> Path:
    """Retourne le fichier .env à charger (ENV_FILE, puis .env.{APP_ENV}, puis .env)."""
    explicit = os.getenv("ENV_FILE")
    if explicit:
        return Path(explicit)
    cwd = Path.cwd()
    specific = cwd / f".env.{os.getenv('APP_ENV', 'dev')}"
    if specific.exists():
        return specific
    return cwd / ".env"


_ENV_FILE_PATH = _resolve_env_file()


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )
    APP_NAME: str = "lifetime-analyzer"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    CORS_ORIGINS: list[AnyHttpUrl] | list[str] = []
    LOG_LEVEL: str = "INFO"

    # Service de génération (SDK OpenAI; tout endpoint compatible via OPENAI_BASE_URL)
    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str | None = None
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float | None = None

    # Formulaire
    MIN_BIRTH_YEAR: int = 1900
    DEFAULT_COUNTRY: str = "India"

    # Sessions en mémoire (aucune persistance)
    MAX_SESSIONS: int = 1000


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
