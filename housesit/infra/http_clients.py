"""Clients HTTP externes (géocodage Nominatim).

Objectif du module
------------------
- Encapsuler les appels réseau vers le géocodeur OpenStreetMap Nominatim.
- Porter l'en-tête `User-Agent` descriptif exigé par la politique d'usage du service.
- Traduire les statuts non-succès et les erreurs réseau en `UpstreamError`.

Les corps JSON invalides renvoyés par le service ne sont pas interceptés: l'erreur de décodage
remonte telle quelle à l'appelant.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
import structlog

from housesit.app.metrics import GEOCODE_UPSTREAM_ERRORS, GEOCODE_UPSTREAM_LATENCY
from housesit.core.http_constants import HTTP_STATUS_SUCCESS_MAX, HTTP_STATUS_SUCCESS_MIN

log = structlog.get_logger(__name__)


class UpstreamError(Exception):
    """Échec du géocodeur amont (statut non-succès ou erreur réseau)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialise l'erreur avec le message exposé et le statut amont éventuel."""
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NominatimClient:
    """Client synchrone pour les endpoints `/search` et `/reverse` de Nominatim."""

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialise le client.

        Args:
            base_url: URL racine du service (ex. https://nominatim.openstreetmap.org).
            user_agent: identifiant client envoyé sur chaque requête.
            timeout: délai maximal d'un appel, en secondes.
            transport: transport httpx alternatif (tests).
        """
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._transport = transport

    def search(
        self,
        query: str,
        *,
        limit: int,
        countrycodes: str | None = None,
        error_message: str = "Geocoding service error",
    ) -> list[dict[str, Any]]:
        """Géocodage direct: retourne la liste brute des candidats du service."""
        params: dict[str, Any] = {"format": "json", "q": query, "limit": limit}
        if countrycodes:
            params["countrycodes"] = countrycodes
        return self._get("search", params, error_message)

    def reverse(
        self,
        lat: float,
        lon: float,
        *,
        error_message: str = "Reverse geocoding service error",
    ) -> dict[str, Any]:
        """Géocodage inverse: retourne l'objet brut décrivant le lieu."""
        params = {"format": "json", "lat": lat, "lon": lon}
        return self._get("reverse", params, error_message)

    def _get(self, endpoint: str, params: dict[str, Any], error_message: str) -> Any:
        start = time.perf_counter()
        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                transport=self._transport,
            ) as client:
                response = client.get(f"/{endpoint}", params=params)
        except httpx.RequestError as err:
            GEOCODE_UPSTREAM_ERRORS.labels(endpoint=endpoint, reason="network").inc()
            log.warning("nominatim_network_error", endpoint=endpoint, error=str(err))
            raise UpstreamError(error_message) from err
        finally:
            GEOCODE_UPSTREAM_LATENCY.labels(endpoint=endpoint).observe(
                time.perf_counter() - start
            )

        if not HTTP_STATUS_SUCCESS_MIN <= response.status_code <= HTTP_STATUS_SUCCESS_MAX:
            GEOCODE_UPSTREAM_ERRORS.labels(endpoint=endpoint, reason="status").inc()
            log.warning(
                "nominatim_bad_status", endpoint=endpoint, status_code=response.status_code
            )
            raise UpstreamError(error_message, status_code=response.status_code)

        return response.json()
