"""
Données de la page de navigation: profils géolocalisés, filtres et recommandations de proximité.

Seuls les profils vérifiés et payés, dotés d'une localisation et d'un rôle gardien/propriétaire,
sont publiés. Les coordonnées proviennent du `LocationResolver` (cache puis géocodeur amont).
"""

from __future__ import annotations

from dataclasses import dataclass

from housesit.domain.entities import BROWSABLE_ROLES, Profile
from housesit.domain.geo import Coordinate, Ranked, rank_by_distance
from housesit.domain.location_resolver import LocationResolver
from housesit.infra.repositories import InMemoryProfileRepo, InMemoryRoleRepo

ALL_ROLES = "all"


@dataclass(frozen=True)
class BrowseProfile:
    """Profil publié avec son rôle et sa coordonnée résolue (ou None)."""

    profile: Profile
    role: str
    coordinate: Coordinate | None


def filter_profiles(
    profiles: list[BrowseProfile], role: str = ALL_ROLES, search: str = ""
) -> list[BrowseProfile]:
    """Filtre par rôle puis par recherche (sous-chaîne, insensible à la casse)."""
    filtered = list(profiles)
    if role != ALL_ROLES:
        filtered = [p for p in filtered if p.role == role]
    if search.strip():
        needle = search.lower()
        filtered = [
            p
            for p in filtered
            if needle in p.profile.name.lower()
            or needle in (p.profile.location or "").lower()
            or needle in (p.profile.bio or "").lower()
        ]
    return filtered


def recommend_nearby(
    profiles: list[BrowseProfile], selected_id: str, limit: int = 3
) -> list[Ranked[BrowseProfile]]:
    """Les `limit` profils les plus proches du profil sélectionné (exclu du résultat)."""
    selected = next((p for p in profiles if p.profile.id == selected_id), None)
    if selected is None or selected.coordinate is None:
        return []
    others = [p for p in profiles if p.profile.id != selected_id]
    return rank_by_distance(selected.coordinate, others, lambda p: p.coordinate, limit=limit)


class BrowseService:
    """Assemble profils, rôles et coordonnées pour la navigation."""

    def __init__(
        self,
        profiles: InMemoryProfileRepo,
        roles: InMemoryRoleRepo,
        resolver: LocationResolver,
    ) -> None:
        """Initialise le service avec ses dépôts et son résolveur."""
        self.profiles = profiles
        self.roles = roles
        self.resolver = resolver

    def published_profiles(self) -> list[BrowseProfile]:
        """Profils publiés, géocodés en lot (un appel sortant par adresse inconnue)."""
        candidates: list[tuple[Profile, str]] = []
        for profile in self.profiles.list_all():
            if not (profile.is_verified and profile.is_paid and profile.location):
                continue
            role = self.roles.get_role(profile.user_id)
            if role in BROWSABLE_ROLES:
                candidates.append((profile, role))

        coords = self.resolver.resolve_many(p.location for p, _ in candidates)
        return [
            BrowseProfile(profile=p, role=role, coordinate=coords.get(p.location or ""))
            for p, role in candidates
        ]

    def browse(self, role: str = ALL_ROLES, search: str = "") -> list[BrowseProfile]:
        """Profils publiés filtrés."""
        return filter_profiles(self.published_profiles(), role, search)

    def nearby(
        self, profile_id: str, limit: int, role: str = ALL_ROLES, search: str = ""
    ) -> list[Ranked[BrowseProfile]]:
        """Recommandations de proximité parmi les profils filtrés.

        Lève `KeyError` si le profil n'est pas publié ou ne passe pas les filtres.
        """
        visible = self.browse(role, search)
        if not any(p.profile.id == profile_id for p in visible):
            raise KeyError(profile_id)
        return recommend_nearby(visible, profile_id, limit)
