"""
Module d'authentification et de signature de jetons.

Ce module fournit la création et la validation des tokens JWT utilisateur, ainsi que les jetons
courts signés qui protègent l'accès aux documents d'identité (URL signées à durée limitée).
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError
from pydantic import BaseModel, ValidationError

DOCUMENT_TOKEN_PURPOSE = "identity-document"


class TokenData(BaseModel):
    """Données contenues dans un token JWT utilisateur."""

    sub: str


def create_access_token(
    secret: str, alg: str, expires_min: int, payload: dict[str, Any]
) -> str:
    """Crée un token JWT d'accès avec expiration."""
    to_encode = payload.copy()
    expire = datetime.now(UTC) + timedelta(minutes=expires_min)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret, algorithm=alg)


def decode_token(token: str, secret: str, alg: str) -> TokenData | None:
    """Décode et valide un token JWT utilisateur."""
    try:
        data = jwt.decode(token, secret, algorithms=[alg])
        return TokenData(**data)
    except (InvalidTokenError, ValidationError):
        return None


def sign_document_path(path: str, secret: str, alg: str, expires_s: int) -> str:
    """Signe un chemin de document pour une durée limitée."""
    payload = {
        "path": path,
        "purpose": DOCUMENT_TOKEN_PURPOSE,
        "exp": datetime.now(UTC) + timedelta(seconds=expires_s),
    }
    return jwt.encode(payload, secret, algorithm=alg)


def verify_document_token(token: str, path: str, secret: str, alg: str) -> bool:
    """Vérifie qu'un jeton signé couvre exactement ce chemin et n'est pas expiré."""
    try:
        data = jwt.decode(token, secret, algorithms=[alg])
    except InvalidTokenError:
        return False
    return data.get("purpose") == DOCUMENT_TOKEN_PURPOSE and data.get("path") == path
