"""
Routes privilégiées de l'administrateur.

`GET /functions/v1/get-pending-users` liste les comptes dont l'identité reste à vérifier.
"""

from fastapi import APIRouter, Depends

from housesit.api.deps import get_container, require_admin
from housesit.api.schemas import PendingUsersOut
from housesit.core.container import Container

router = APIRouter(prefix="/functions/v1", tags=["admin"])


@router.get("/get-pending-users", response_model=PendingUsersOut)
def get_pending_users(
    _admin_id: str = Depends(require_admin),
    container: Container = Depends(get_container),
):
    """Profils non vérifiés (plus récents d'abord) avec email, rôle et URL signée du document."""
    return {"users": container.verification.pending_users()}
