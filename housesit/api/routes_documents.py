"""
Téléchargement des pièces d'identité via URL signée.

Le jeton `token` doit avoir été émis pour exactement ce chemin et ne pas être expiré.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from housesit.api.deps import get_container
from housesit.apigw.errors import not_found, unauthorized
from housesit.core.container import Container
from housesit.domain.auth import verify_document_token
from housesit.domain.verification import DOCUMENT_BUCKET

router = APIRouter(prefix="/storage", tags=["documents"])


@router.get(f"/{DOCUMENT_BUCKET}/{{path:path}}")
def get_identity_document(
    path: str,
    token: str = "",
    container: Container = Depends(get_container),
):
    """Sert le document si l'URL signée est valide."""
    settings = container.settings
    if not token or not verify_document_token(token, path, settings.JWT_SECRET, settings.JWT_ALG):
        raise unauthorized()
    file_path = container.documents.open_path(path)
    if file_path is None:
        raise not_found("Document not found")
    return FileResponse(file_path)
