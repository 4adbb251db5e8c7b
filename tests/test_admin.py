"""
Tests pour la liste des comptes en attente de vérification et les URL signées des documents.

Ce module teste le contrôle d'accès administrateur, l'ordre et l'enrichissement des profils en
attente, puis le téléchargement des pièces d'identité via URL signée.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from urllib.parse import urlsplit

import pytest
from fastapi.testclient import TestClient

from housesit.core.container import Container
from housesit.core.http_constants import (
    HTTP_FORBIDDEN,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_UNAUTHORIZED,
)
from housesit.domain.auth import sign_document_path
from housesit.domain.entities import User, UserRole
from housesit.domain.verification import document_object_path
from housesit.infra.document_store import LocalDocumentStore
from tests.fakes import JWT_SECRET, add_member, make_profile

PENDING_URL = "/functions/v1/get-pending-users"


@pytest.fixture
def admin_headers(container: Container, user_token: Callable[[str], str]) -> dict[str, str]:
    """En-têtes d'un administrateur authentifié."""
    container.user_repo.save(User(id="admin-1", email="admin@example.com"))
    container.role_repo.save(UserRole(user_id="admin-1", role="admin"))
    return {"Authorization": f"Bearer {user_token('admin-1')}"}


@pytest.fixture
def pending(container: Container) -> Container:
    """Trois profils en attente et un profil déjà vérifié."""
    add_member(
        container,
        make_profile(
            "old",
            "Sydney, NSW",
            is_verified=False,
            document_url="https://storage.example/object/identity-documents/old/passport.png",
            created_at=datetime(2024, 1, 1, tzinfo=UTC),
        ),
        "sitter",
        email="old@example.com",
    )
    add_member(
        container,
        make_profile(
            "new",
            "Melbourne, VIC",
            is_verified=False,
            document_url="new/licence.pdf",
            created_at=datetime(2024, 3, 1, tzinfo=UTC),
        ),
        "homeowner",
        email="new@example.com",
    )
    add_member(
        container,
        make_profile("orphan", None, is_verified=False, created_at=datetime(2024, 2, 1, tzinfo=UTC)),
        None,
    )
    add_member(container, make_profile("done", "Perth, WA"), "sitter", email="done@example.com")
    return container


class TestPendingUsers:
    """Tests de `GET /functions/v1/get-pending-users`."""

    def test_requires_authentication(self, client: TestClient) -> None:
        r = client.get(PENDING_URL)
        assert r.status_code == HTTP_UNAUTHORIZED
        assert r.json() == {"error": "Unauthorized"}

    def test_rejects_invalid_token(self, client: TestClient) -> None:
        r = client.get(PENDING_URL, headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == HTTP_UNAUTHORIZED

    def test_rejects_app_key(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        assert client.get(PENDING_URL, headers=auth_headers).status_code == HTTP_UNAUTHORIZED

    def test_non_admin_is_forbidden(
        self, client: TestClient, pending: Container, user_token: Callable[[str], str]
    ) -> None:
        r = client.get(PENDING_URL, headers={"Authorization": f"Bearer {user_token('user-old')}"})
        assert r.status_code == HTTP_FORBIDDEN
        assert r.json() == {"error": "Access denied - admin only"}

    def test_lists_unverified_newest_first(
        self, client: TestClient, pending: Container, admin_headers: dict[str, str]
    ) -> None:
        r = client.get(PENDING_URL, headers=admin_headers)
        assert r.status_code == HTTP_OK
        users = r.json()["users"]
        assert [u["id"] for u in users] == ["new", "orphan", "old"]

    def test_records_are_enriched(
        self, client: TestClient, pending: Container, admin_headers: dict[str, str]
    ) -> None:
        users = {u["id"]: u for u in client.get(PENDING_URL, headers=admin_headers).json()["users"]}

        assert users["new"]["email"] == "new@example.com"
        assert users["new"]["role"] == "homeowner"
        assert users["new"]["is_verified"] is False

        assert users["orphan"]["email"] == "N/A"
        assert users["orphan"]["role"] == "N/A"
        assert users["orphan"]["document_url"] is None

        assert users["old"]["document_url"].startswith(
            "http://testserver/storage/identity-documents/old/passport.png?token="
        )

    def test_signed_url_downloads_document(
        self,
        client: TestClient,
        pending: Container,
        admin_headers: dict[str, str],
        settings,
    ) -> None:
        doc = Path(settings.DOCUMENTS_DIR) / "new" / "licence.pdf"
        doc.parent.mkdir(parents=True)
        doc.write_bytes(b"%PDF-1.4 fake")

        users = client.get(PENDING_URL, headers=admin_headers).json()["users"]
        url = urlsplit(next(u for u in users if u["id"] == "new")["document_url"])

        r = client.get(f"{url.path}?{url.query}")
        assert r.status_code == HTTP_OK
        assert r.content == b"%PDF-1.4 fake"


class TestDocumentDownload:
    """Tests de `GET /storage/identity-documents/{path}`."""

    def test_missing_token_is_unauthorized(self, client: TestClient) -> None:
        r = client.get("/storage/identity-documents/new/licence.pdf")
        assert r.status_code == HTTP_UNAUTHORIZED

    def test_token_for_other_path_is_unauthorized(self, client: TestClient) -> None:
        token = sign_document_path("other/file.pdf", JWT_SECRET, "HS256", 60)
        r = client.get("/storage/identity-documents/new/licence.pdf", params={"token": token})
        assert r.status_code == HTTP_UNAUTHORIZED

    def test_expired_token_is_unauthorized(self, client: TestClient) -> None:
        token = sign_document_path("new/licence.pdf", JWT_SECRET, "HS256", -10)
        r = client.get("/storage/identity-documents/new/licence.pdf", params={"token": token})
        assert r.status_code == HTTP_UNAUTHORIZED

    def test_missing_file_is_not_found(self, client: TestClient) -> None:
        token = sign_document_path("new/absent.pdf", JWT_SECRET, "HS256", 60)
        r = client.get("/storage/identity-documents/new/absent.pdf", params={"token": token})
        assert r.status_code == HTTP_NOT_FOUND
        assert r.json() == {"error": "Document not found"}


def test_document_store_refuses_paths_outside_root(tmp_path: Path) -> None:
    """Teste le refus des chemins sortant du répertoire racine."""
    root = tmp_path / "docs"
    root.mkdir()
    (tmp_path / "secret.txt").write_text("nope", encoding="utf-8")
    (root / "ok.txt").write_text("ok", encoding="utf-8")

    store = LocalDocumentStore(root)
    assert store.open_path("../secret.txt") is None
    assert store.open_path("ok.txt") == (root / "ok.txt").resolve()
    assert store.open_path("missing.txt") is None


@pytest.mark.parametrize(
    ("stored", "expected"),
    [
        ("https://cdn.example/storage/v1/object/identity-documents/u1/id.png", "u1/id.png"),
        ("u1/id.png", "u1/id.png"),
    ],
)
def test_document_object_path(stored: str, expected: str) -> None:
    """Teste l'extraction du chemin d'objet depuis une référence stockée."""
    assert document_object_path(stored) == expected
