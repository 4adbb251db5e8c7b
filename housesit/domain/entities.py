"""
Entités du domaine métier.

Ce module définit les modèles de données principaux de la place de marché de garde de maison:
comptes, rôles et profils publics.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

Role = Literal["admin", "sitter", "homeowner"]
BROWSABLE_ROLES: tuple[str, ...] = ("sitter", "homeowner")


class User(BaseModel):
    """Compte d'authentification (identifiant et email)."""

    id: str
    email: str


class UserRole(BaseModel):
    """Rôle attribué à un compte."""

    user_id: str
    role: Role


class Profile(BaseModel):
    """Profil public d'un gardien ou d'un propriétaire."""

    id: str
    user_id: str
    name: str
    location: str | None = None
    bio: str | None = None
    is_verified: bool = False
    is_paid: bool = False
    document_url: str | None = None
    created_at: datetime
