"""Cache mémoire adresse → coordonnée.

La clé est l'adresse passée en minuscules, sans autre normalisation: deux saisies qui ne diffèrent
que par la casse partagent la même entrée. Les entrées ne sont jamais expirées ni évincées; elles
disparaissent au redémarrage du processus.
"""

from __future__ import annotations

import threading

from housesit.domain.geo import Coordinate


def normalize_location(location: str) -> str:
    """Clé de cache pour une adresse (minuscules uniquement, pas de trim)."""
    return location.lower()


class GeocodeCache:
    """Mémoïsation thread-safe des résolutions réussies."""

    def __init__(self) -> None:
        """Initialise un cache vide."""
        self._entries: dict[str, Coordinate] = {}
        self._lock = threading.Lock()

    def get(self, location: str) -> Coordinate | None:
        """Retourne la coordonnée connue pour l'adresse, sans appel réseau."""
        with self._lock:
            return self._entries.get(normalize_location(location))

    def put(self, location: str, coordinate: Coordinate) -> None:
        """Enregistre une résolution réussie."""
        with self._lock:
            self._entries[normalize_location(location)] = coordinate

    def __contains__(self, location: str) -> bool:
        with self._lock:
            return normalize_location(location) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
