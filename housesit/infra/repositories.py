"""
Repositories pour la gestion des données.

Ce module fournit des dépôts en mémoire pour les comptes, les rôles et les profils, ainsi qu'un
chargeur optionnel depuis un fichier JSON d'amorçage (dev/tests).
"""

import json
from pathlib import Path

from housesit.domain.entities import Profile, User, UserRole


class InMemoryUserRepo:
    """Dépôt de comptes en mémoire, indexé par identifiant."""

    def __init__(self):
        """Initialise une base mémoire vide."""
        self._db: dict[str, User] = {}

    def save(self, user: User) -> User:
        """Enregistre/écrase un compte et le renvoie."""
        self._db[user.id] = user
        return user

    def get(self, user_id: str) -> User | None:
        """Retourne un compte par id, ou None s'il est absent."""
        return self._db.get(user_id)


class InMemoryRoleRepo:
    """Rôles par compte (un rôle au plus par compte)."""

    def __init__(self):
        """Initialise une base mémoire vide."""
        self._db: dict[str, UserRole] = {}

    def save(self, role: UserRole) -> UserRole:
        """Attribue (ou remplace) le rôle d'un compte."""
        self._db[role.user_id] = role
        return role

    def get_role(self, user_id: str) -> str | None:
        """Retourne le rôle d'un compte, ou None."""
        entry = self._db.get(user_id)
        return entry.role if entry else None


class InMemoryProfileRepo:
    """Dépôt de profils en mémoire; l'ordre d'insertion est conservé."""

    def __init__(self):
        """Initialise une base mémoire vide."""
        self._db: dict[str, Profile] = {}

    def save(self, profile: Profile) -> Profile:
        """Enregistre/écrase un profil et le renvoie."""
        self._db[profile.id] = profile
        return profile

    def get(self, profile_id: str) -> Profile | None:
        """Retourne un profil par id, ou None."""
        return self._db.get(profile_id)

    def list_all(self) -> list[Profile]:
        """Retourne tous les profils dans l'ordre d'insertion."""
        return list(self._db.values())

    def list_unverified(self) -> list[Profile]:
        """Profils non vérifiés, du plus récent au plus ancien."""
        pending = [p for p in self._db.values() if not p.is_verified]
        return sorted(pending, key=lambda p: p.created_at, reverse=True)


def load_seed(
    path: str | Path,
    users: InMemoryUserRepo,
    roles: InMemoryRoleRepo,
    profiles: InMemoryProfileRepo,
) -> None:
    """Charge `{"users": [...], "roles": [...], "profiles": [...]}` dans les dépôts."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    for raw in data.get("users", []):
        users.save(User(**raw))
    for raw in data.get("roles", []):
        roles.save(UserRole(**raw))
    for raw in data.get("profiles", []):
        profiles.save(Profile(**raw))
