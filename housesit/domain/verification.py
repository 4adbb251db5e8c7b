"""
Vérification d'identité: liste des comptes en attente pour l'administrateur.

Chaque profil non vérifié est enrichi de l'email du compte, de son rôle et d'une URL signée à durée
limitée vers la pièce d'identité déposée.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from housesit.domain.auth import sign_document_path
from housesit.infra.repositories import InMemoryProfileRepo, InMemoryRoleRepo, InMemoryUserRepo

DOCUMENT_BUCKET = "identity-documents"
NOT_AVAILABLE = "N/A"


def document_object_path(document_url: str) -> str:
    """Chemin de l'objet dans le dépôt de documents.

    Les références stockées peuvent être des URL complètes: seul ce qui suit
    `identity-documents/` compte. Sinon la valeur est déjà un chemin.
    """
    marker = f"{DOCUMENT_BUCKET}/"
    if marker in document_url:
        return document_url.split(marker, 1)[1]
    return document_url


class VerificationService:
    """Requêtes privilégiées réservées aux administrateurs."""

    def __init__(
        self,
        users: InMemoryUserRepo,
        roles: InMemoryRoleRepo,
        profiles: InMemoryProfileRepo,
        *,
        secret: str,
        alg: str,
        public_base_url: str,
        url_ttl_s: int = 3600,
    ) -> None:
        """Initialise le service avec ses dépôts et les paramètres de signature d'URL."""
        self.users = users
        self.roles = roles
        self.profiles = profiles
        self.secret = secret
        self.alg = alg
        self.public_base_url = public_base_url.rstrip("/")
        self.url_ttl_s = url_ttl_s

    def is_admin(self, user_id: str) -> bool:
        """Indique si le compte a le rôle administrateur."""
        return self.roles.get_role(user_id) == "admin"

    def signed_document_url(self, document_url: str | None) -> str | None:
        """URL signée vers la pièce d'identité, ou None si aucune pièce."""
        if not document_url:
            return None
        path = document_object_path(document_url)
        token = sign_document_path(path, self.secret, self.alg, self.url_ttl_s)
        return f"{self.public_base_url}/storage/{DOCUMENT_BUCKET}/{quote(path)}?token={token}"

    def pending_users(self) -> list[dict[str, Any]]:
        """Profils non vérifiés, du plus récent au plus ancien, enrichis."""
        pending = []
        for profile in self.profiles.list_unverified():
            user = self.users.get(profile.user_id)
            record = profile.model_dump(mode="json")
            record["document_url"] = self.signed_document_url(profile.document_url)
            record["email"] = user.email if user else NOT_AVAILABLE
            record["role"] = self.roles.get_role(profile.user_id) or NOT_AVAILABLE
            pending.append(record)
        return pending
