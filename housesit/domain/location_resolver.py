"""
Résolution d'adresses en coordonnées, avec cache et délai de courtoisie.

Le cache est consulté avant tout appel sortant. Sur un défaut de cache, on attend un délai fixe
(1 s par défaut) avant d'interroger le géocodeur, ce qui respecte la limite implicite d'une requête
par seconde du service: résoudre N adresses inconnues prend donc au moins N secondes. Les échecs et
les résultats vides ne sont jamais mis en cache.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable

import structlog

from housesit.app.metrics import GEOCODE_CACHE_HITS, GEOCODE_CACHE_MISSES
from housesit.domain.geo import Coordinate
from housesit.domain.geocode_cache import GeocodeCache
from housesit.infra.http_clients import NominatimClient, UpstreamError

log = structlog.get_logger(__name__)


class LocationResolver:
    """Résout des adresses libres en `Coordinate` (meilleur candidat uniquement)."""

    def __init__(
        self,
        client: NominatimClient,
        cache: GeocodeCache,
        country_suffix: str = ", Australia",
        delay_s: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialise le résolveur.

        Args:
            client: client du géocodeur amont.
            cache: cache partagé adresse → coordonnée.
            country_suffix: qualificatif ajouté à chaque adresse.
            delay_s: attente avant chaque appel sortant.
            sleep: fonction d'attente (injectable pour les tests).
        """
        self.client = client
        self.cache = cache
        self.country_suffix = country_suffix
        self.delay_s = delay_s
        self._sleep = sleep

    def resolve(self, location: str) -> Coordinate | None:
        """Retourne la coordonnée d'une adresse, ou None si introuvable/indisponible."""
        cached = self.cache.get(location)
        if cached is not None:
            GEOCODE_CACHE_HITS.inc()
            return cached
        GEOCODE_CACHE_MISSES.inc()

        if self.delay_s > 0:
            self._sleep(self.delay_s)

        try:
            results = self.client.search(location + self.country_suffix, limit=1)
            if not results:
                return None
            first = results[0]
            coordinate = Coordinate(lat=float(first["lat"]), lon=float(first["lon"]))
        except (UpstreamError, ValueError, KeyError, TypeError, IndexError) as err:
            log.warning("location_resolution_failed", location=location, error=str(err))
            return None

        self.cache.put(location, coordinate)
        return coordinate

    def resolve_many(self, locations: Iterable[str | None]) -> dict[str, Coordinate]:
        """Résout séquentiellement des adresses uniques; seules les réussites sont retournées."""
        unique: list[str] = []
        seen: set[str] = set()
        for location in locations:
            if location and location not in seen:
                seen.add(location)
                unique.append(location)

        resolved: dict[str, Coordinate] = {}
        for location in unique:
            coordinate = self.resolve(location)
            if coordinate is not None:
                resolved[location] = coordinate
        log.debug("locations_resolved", requested=len(unique), resolved=len(resolved))
        return resolved
