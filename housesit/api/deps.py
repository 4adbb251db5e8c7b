"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Exposer aux endpoints les composants du conteneur rattaché à l'application
  (`request.app.state.container`), sans état global de module.
- Centraliser les contrôles transverses: clé applicative, rate limiting du proxy,
  authentification et rôle administrateur.
"""

import logging
from typing import Any

from fastapi import Depends, Request

from housesit.apigw.auth_utils import authenticate_user, verify_app_key
from housesit.apigw.errors import bad_request, forbidden, rate_limited
from housesit.apigw.rate_limit import client_identifier
from housesit.app.metrics import RATE_LIMIT_BLOCKS, route_label
from housesit.core.container import Container

log = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests. Please try again later."
ADMIN_ONLY_MESSAGE = "Access denied - admin only"
INVALID_JSON_MESSAGE = "Invalid JSON body"
JSON_OBJECT_MESSAGE = "Request body must be a JSON object"


def get_container(request: Request) -> Container:
    """Retourne le conteneur de l'application courante."""
    return request.app.state.container


def require_app_key(request: Request, container: Container = Depends(get_container)) -> None:
    """Exige la clé applicative partagée."""
    verify_app_key(request, container.settings.APP_API_KEY)


def enforce_rate_limit(request: Request, container: Container = Depends(get_container)) -> str:
    """Comptabilise la requête pour son client; 429 au-delà du seuil de la fenêtre."""
    client_id = client_identifier(request)
    result = container.rate_limiter.check(client_id)
    if not result.allowed:
        log.warning(
            "Rate limit exceeded",
            extra={"client": client_id, "path": request.url.path, "retry_after": result.retry_after},
        )
        RATE_LIMIT_BLOCKS.labels(route=route_label(request)).inc()
        raise rate_limited(RATE_LIMITED_MESSAGE, retry_after=result.retry_after)
    return client_id


def require_admin(request: Request, container: Container = Depends(get_container)) -> str:
    """Exige un utilisateur authentifié ayant le rôle administrateur."""
    settings = container.settings
    user_id = authenticate_user(request, settings.JWT_SECRET, settings.JWT_ALG)
    if not container.verification.is_admin(user_id):
        raise forbidden(ADMIN_ONLY_MESSAGE)
    return user_id


async def read_json_object(request: Request) -> dict[str, Any]:
    """Décode le corps JSON de la requête; 400 s'il est invalide ou n'est pas un objet.

    À résoudre après `require_app_key` et `enforce_rate_limit`.
    """
    try:
        payload = await request.json()
    except ValueError as err:
        raise bad_request(INVALID_JSON_MESSAGE) from err
    if not isinstance(payload, dict):
        raise bad_request(JSON_OBJECT_MESSAGE)
    return payload
