"""
Routes de navigation: profils géolocalisés et recommandations de proximité.

Les adresses des profils sont résolues via le cache puis le géocodeur amont, avec le délai de
courtoisie par adresse inconnue: la première consultation peut donc être lente.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query

from housesit.api.deps import get_container, require_app_key
from housesit.api.schemas import BrowseProfileOut, NearbyProfileOut
from housesit.apigw.errors import not_found
from housesit.core.container import Container
from housesit.domain.browse import BrowseProfile

router = APIRouter(prefix="/browse", tags=["browse"], dependencies=[Depends(require_app_key)])

RoleFilter = Literal["all", "sitter", "homeowner"]


def _to_out(entry: BrowseProfile) -> dict:
    profile = entry.profile
    coord = entry.coordinate
    return {
        "id": profile.id,
        "user_id": profile.user_id,
        "name": profile.name,
        "location": profile.location,
        "bio": profile.bio,
        "role": entry.role,
        "created_at": profile.created_at,
        "lat": coord.lat if coord else None,
        "lng": coord.lon if coord else None,
    }


@router.get("/profiles", response_model=list[BrowseProfileOut])
def list_profiles(
    role: RoleFilter = "all",
    q: str = "",
    container: Container = Depends(get_container),
):
    """Profils publiés, filtrés par rôle et recherche libre (nom, localisation, bio)."""
    return [_to_out(p) for p in container.browse.browse(role, q)]


@router.get("/profiles/{profile_id}/nearby", response_model=list[NearbyProfileOut])
def nearby_profiles(
    profile_id: str,
    limit: int | None = Query(None, ge=1, le=50),
    role: RoleFilter = "all",
    q: str = "",
    container: Container = Depends(get_container),
):
    """Profils les plus proches du profil sélectionné, par distance croissante."""
    max_results = limit or container.settings.RECOMMENDED_PROFILES_LIMIT
    try:
        ranked = container.browse.nearby(profile_id, max_results, role, q)
    except KeyError as err:
        raise not_found("Profile not found") from err
    return [{**_to_out(r.item), "distance_km": r.distance_km} for r in ranked]
