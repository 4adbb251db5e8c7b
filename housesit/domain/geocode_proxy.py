"""
Proxy de géocodage: validation des entrées et relais vers le géocodeur amont.

Deux modes:
- direct: `query` (2 à 500 caractères) complétée du qualificatif pays, au plus N candidats;
- inverse: `lat`/`lon` numériques dans [-90, 90] / [-180, 180].

Les réponses amont sont renvoyées sans transformation; l'appelant choisit le meilleur candidat.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from housesit.infra.http_clients import NominatimClient

QUERY_LENGTH_MESSAGE = "Query must be between 2 and 500 characters"
INVALID_COORDINATES_MESSAGE = "Invalid coordinates"


class InvalidInput(ValueError):
    """Entrée client invalide (jamais réessayée automatiquement)."""


@dataclass
class ForwardOptions:
    """Paramètres fixes du géocodage direct."""

    country_suffix: str = ", Australia"
    countrycodes: str | None = "au"
    max_results: int = 5
    min_length: int = 2
    max_length: int = 500


def parse_coordinate(value: Any, bound: float) -> float:
    """Convertit une composante en float fini dans [-bound, bound], sinon `InvalidInput`."""
    if isinstance(value, bool) or value is None:
        raise InvalidInput(INVALID_COORDINATES_MESSAGE)
    try:
        number = float(value)
    except (TypeError, ValueError) as err:
        raise InvalidInput(INVALID_COORDINATES_MESSAGE) from err
    if not math.isfinite(number) or not -bound <= number <= bound:
        raise InvalidInput(INVALID_COORDINATES_MESSAGE)
    return number


def is_reverse_request(payload: dict[str, Any]) -> bool:
    """Le mode inverse est choisi dès que `lat` et `lon` sont tous deux présents."""
    return "lat" in payload and "lon" in payload


class GeocodeProxy:
    """Relais sans état (hors rate limiting) vers le géocodeur amont."""

    def __init__(self, client: NominatimClient, options: ForwardOptions | None = None) -> None:
        """Initialise le proxy avec son client amont et ses paramètres de recherche."""
        self.client = client
        self.options = options or ForwardOptions()

    def validate_query(self, query: Any) -> str:
        """Vérifie la requête textuelle du mode direct."""
        opts = self.options
        if not isinstance(query, str) or not opts.min_length <= len(query) <= opts.max_length:
            raise InvalidInput(QUERY_LENGTH_MESSAGE)
        return query

    def forward(self, query: Any) -> list[dict[str, Any]]:
        """Géocodage direct; la validation précède tout appel sortant."""
        text = self.validate_query(query)
        return self.client.search(
            text + self.options.country_suffix,
            limit=self.options.max_results,
            countrycodes=self.options.countrycodes,
        )

    def reverse(self, lat: Any, lon: Any) -> dict[str, Any]:
        """Géocodage inverse; la validation précède tout appel sortant."""
        lat_num = parse_coordinate(lat, 90.0)
        lon_num = parse_coordinate(lon, 180.0)
        return self.client.reverse(lat_num, lon_num)

    def handle(self, payload: dict[str, Any]) -> Any:
        """Aiguille une requête JSON vers le bon mode; retourne le résultat brut."""
        if is_reverse_request(payload):
            return self.reverse(payload["lat"], payload["lon"])
        return self.forward(payload.get("query"))
