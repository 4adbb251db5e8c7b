"""
Utilitaires d'authentification pour les routes.

Deux modèles de confiance coexistent:
- clé applicative partagée (`Authorization: Bearer <clé>`) pour le proxy de géocodage et la
  navigation: elle identifie l'application appelante, pas l'utilisateur;
- jeton utilisateur JWT (`sub` = identifiant du compte) pour les requêtes privilégiées, dont le
  rôle est ensuite contrôlé côté serveur.
"""

import hmac
import logging

from fastapi import Request

from housesit.apigw.errors import unauthorized
from housesit.domain.auth import decode_token

log = logging.getLogger(__name__)


def extract_bearer(request: Request) -> str | None:
    """Retourne le jeton porté par l'en-tête Authorization, ou None."""
    authorization = request.headers.get("Authorization")
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None


def verify_app_key(request: Request, expected: str) -> None:
    """Lève 401 si la clé applicative est absente ou incorrecte."""
    token = extract_bearer(request)
    if token is None or not hmac.compare_digest(token.encode(), expected.encode()):
        log.info("App key rejected", extra={"path": request.url.path})
        raise unauthorized()


def authenticate_user(request: Request, secret: str, alg: str) -> str:
    """Valide le JWT utilisateur et retourne l'identifiant du compte (401 sinon)."""
    token = extract_bearer(request)
    if token is None:
        raise unauthorized()
    data = decode_token(token, secret, alg)
    if data is None:
        log.info("User token rejected", extra={"path": request.url.path})
        raise unauthorized()
    return data.sub
