"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports `housesit` en ajoutant la racine du projet au
sys.path, et fournit des fixtures construisant une application isolée (conteneur propre, géocodeur
factice, aucun délai de courtoisie).
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Ensure project root is on sys.path so that
# imports like `from housesit...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fastapi.testclient import TestClient  # noqa: E402

from housesit.app.main import create_app  # noqa: E402
from housesit.core.container import Container  # noqa: E402
from housesit.core.settings import Settings  # noqa: E402
from housesit.domain.auth import create_access_token  # noqa: E402
from housesit.infra.http_clients import NominatimClient  # noqa: E402
from tests.fakes import APP_KEY, FAKE_BASE_URL, JWT_SECRET, FakeNominatim  # noqa: E402


@pytest.fixture
def fake_nominatim() -> FakeNominatim:
    """Géocodeur amont factice."""
    return FakeNominatim()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Paramètres de test: clé connue, pas de délai, documents dans un répertoire temporaire."""
    return Settings(
        APP_API_KEY=APP_KEY,
        JWT_SECRET=JWT_SECRET,
        NOMINATIM_BASE_URL=FAKE_BASE_URL,
        GEOCODE_BATCH_DELAY_S=0,
        DOCUMENTS_DIR=str(tmp_path / "identity-documents"),
        PUBLIC_BASE_URL="http://testserver",
        SEED_DATA_PATH=None,
    )


@pytest.fixture
def geocoder(settings: Settings, fake_nominatim: FakeNominatim) -> NominatimClient:
    """Client Nominatim branché sur le transport factice."""
    return NominatimClient(
        base_url=settings.NOMINATIM_BASE_URL,
        user_agent=settings.NOMINATIM_USER_AGENT,
        transport=fake_nominatim.transport,
    )


@pytest.fixture
def container(settings: Settings, geocoder: NominatimClient) -> Container:
    """Conteneur isolé branché sur le géocodeur factice."""
    return Container(settings=settings, geocoder=geocoder)


@pytest.fixture
def client(container: Container) -> TestClient:
    """Client HTTP de test sur une application isolée."""
    return TestClient(create_app(container))


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """En-têtes portant la clé applicative."""
    return {"Authorization": f"Bearer {APP_KEY}"}


@pytest.fixture
def user_token() -> Callable[[str], str]:
    """Fabrique de JWT utilisateur signés avec le secret de test."""

    def _make(user_id: str) -> str:
        return create_access_token(JWT_SECRET, "HS256", 30, {"sub": user_id})

    return _make
