"""
Types géographiques et classement par distance.

Ce module fournit la coordonnée immuable utilisée partout dans l'application, la distance
orthodromique (formule de haversine) et le tri de candidats par proximité d'un point de référence.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

EARTH_RADIUS_KM = 6371.0

T = TypeVar("T")


@dataclass(frozen=True)
class Coordinate:
    """Couple (latitude, longitude) en degrés décimaux, WGS84."""

    lat: float
    lon: float


@dataclass(frozen=True)
class Ranked(Generic[T]):
    """Candidat accompagné de sa distance (km) au point de référence."""

    item: T
    distance_km: float


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Distance orthodromique entre deux coordonnées, en kilomètres."""
    d_lat = math.radians(b.lat - a.lat)
    d_lon = math.radians(b.lon - a.lon)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def rank_by_distance(
    reference: Coordinate,
    candidates: Iterable[T],
    coordinate_of: Callable[[T], Coordinate | None],
    limit: int | None = None,
) -> list[Ranked[T]]:
    """
    Classe des candidats par distance croissante au point de référence.

    Paramètres:
    - reference: point de référence.
    - candidates: éléments à classer (ordre d'entrée conservé à distance égale).
    - coordinate_of: extrait la coordonnée d'un candidat, ou None si inconnue.
    - limit: nombre maximal de résultats (None = tous).

    Retour: liste de `Ranked`, les candidats sans coordonnée étant exclus.
    """
    ranked: list[Ranked[T]] = []
    for candidate in candidates:
        coord = coordinate_of(candidate)
        if coord is None:
            continue
        ranked.append(Ranked(item=candidate, distance_km=haversine_km(reference, coord)))
    # sorted() is stable: ties keep input order
    ranked = sorted(ranked, key=lambda r: r.distance_km)
    if limit is not None:
        ranked = ranked[: max(0, limit)]
    return ranked
