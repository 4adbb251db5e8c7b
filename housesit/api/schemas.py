# Schémas Pydantic exposés par l'API (réponses).

from datetime import datetime

from pydantic import BaseModel


class BrowseProfileOut(BaseModel):
    """Profil publié, tel que renvoyé par la navigation.

    Champs:
    - id, user_id, name, location, bio: données publiques du profil
    - role: "sitter" | "homeowner"
    - lat / lng: coordonnée résolue, ou null si l'adresse n'a pas pu être géocodée
    """

    id: str
    user_id: str
    name: str
    location: str | None = None
    bio: str | None = None
    role: str
    created_at: datetime
    lat: float | None = None
    lng: float | None = None


class NearbyProfileOut(BrowseProfileOut):
    """Profil recommandé avec sa distance (km) au profil sélectionné."""

    distance_km: float


class PendingUsersOut(BaseModel):
    """Réponse de la liste des comptes en attente de vérification."""

    users: list[dict]


class HealthOut(BaseModel):
    """État du service."""

    status: str
    geocode_cache_entries: int
    rate_limit_clients: int
