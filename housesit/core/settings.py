"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "housesit-geo"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    CORS_ORIGINS: list[str] = ["*"]
    # Clé applicative partagée (pas une identité utilisateur)
    APP_API_KEY: str = "dev-anon-key"
    # JWT/Auth
    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALG: str = "HS256"

    # Géocodeur amont (Nominatim)
    NOMINATIM_BASE_URL: str = "https://nominatim.openstreetmap.org"
    NOMINATIM_USER_AGENT: str = "HouseSittingApp/1.0"
    NOMINATIM_TIMEOUT_S: float = 10.0
    GEOCODE_COUNTRY_SUFFIX: str = ", Australia"
    GEOCODE_COUNTRY_CODES: str = "au"
    GEOCODE_MAX_RESULTS: int = 5
    GEOCODE_QUERY_MIN_LEN: int = 2
    GEOCODE_QUERY_MAX_LEN: int = 500
    # Rate limit du proxy (fenêtre fixe)
    GEOCODE_RATE_LIMIT: int = 20
    GEOCODE_RATE_WINDOW_S: int = 60
    # Délai de courtoisie avant chaque appel sortant d'un lot
    GEOCODE_BATCH_DELAY_S: float = 1.0

    # Browse
    RECOMMENDED_PROFILES_LIMIT: int = 3

    # Documents d'identité
    DOCUMENTS_DIR: str = "./identity-documents"
    DOCUMENT_URL_TTL_S: int = 3600
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    SEED_DATA_PATH: str | None = None


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
