"""
Endpoint de santé pour vérifier la disponibilité de l'API.

Expose `/health` avec la taille du cache de résolution et le nombre de clients suivis par le rate
limiter (les deux états mémoire du processus).
"""

from fastapi import APIRouter, Depends

from housesit.api.deps import get_container
from housesit.api.schemas import HealthOut
from housesit.core.container import Container

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(container: Container = Depends(get_container)):
    """Vérifie la disponibilité de l'API."""
    return {
        "status": "ok",
        "geocode_cache_entries": len(container.geocode_cache),
        "rate_limit_clients": len(container.rate_limiter),
    }
