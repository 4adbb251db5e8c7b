"""Tests pour la résolution d'adresses (cache, délai de courtoisie, échecs non mis en cache)."""

from __future__ import annotations

import pytest

from housesit.domain.geo import Coordinate
from housesit.domain.geocode_cache import GeocodeCache
from housesit.domain.location_resolver import LocationResolver
from housesit.infra.http_clients import NominatimClient
from tests.fakes import CARLTON, MELBOURNE, SYDNEY, FakeNominatim


@pytest.fixture
def sleeps() -> list[float]:
    """Enregistre les attentes demandées par le résolveur."""
    return []


@pytest.fixture
def resolver(geocoder: NominatimClient, sleeps: list[float]) -> LocationResolver:
    """Résolveur avec cache neuf et attente factice de 1 s."""
    return LocationResolver(geocoder, GeocodeCache(), delay_s=1.0, sleep=sleeps.append)


def test_second_lookup_hits_cache(resolver: LocationResolver, fake_nominatim: FakeNominatim) -> None:
    """Teste qu'une adresse déjà résolue ne déclenche pas de second appel réseau."""
    fake_nominatim.search_results["Sydney, NSW, Australia"] = [SYDNEY]

    first = resolver.resolve("Sydney, NSW")
    second = resolver.resolve("sydney, nsw")

    assert first == Coordinate(-33.8688, 151.2093)
    assert second == first
    assert len(fake_nominatim.calls_to("search")) == 1


def test_outbound_query_uses_suffix_and_single_result(
    resolver: LocationResolver, fake_nominatim: FakeNominatim
) -> None:
    """Teste les paramètres envoyés au géocodeur."""
    fake_nominatim.search_results["Carlton, VIC, Australia"] = [CARLTON]
    resolver.resolve("Carlton, VIC")

    request = fake_nominatim.calls_to("search")[0]
    assert request.url.params["q"] == "Carlton, VIC, Australia"
    assert request.url.params["limit"] == "1"
    assert request.url.params["format"] == "json"
    assert request.headers["User-Agent"] == "HouseSittingApp/1.0"


def test_delay_precedes_each_outbound_call_only(
    resolver: LocationResolver, fake_nominatim: FakeNominatim, sleeps: list[float]
) -> None:
    """Teste que le délai n'est appliqué qu'avant un appel sortant (pas sur un cache hit)."""
    fake_nominatim.search_results["Sydney, NSW, Australia"] = [SYDNEY]
    fake_nominatim.search_results["Melbourne, VIC, Australia"] = [MELBOURNE]

    resolver.resolve("Sydney, NSW")
    resolver.resolve("Melbourne, VIC")
    resolver.resolve("Sydney, NSW")

    assert sleeps == [1.0, 1.0]


def test_empty_result_is_not_cached(
    resolver: LocationResolver, fake_nominatim: FakeNominatim
) -> None:
    """Teste qu'un résultat vide renvoie None et n'empoisonne pas le cache."""
    assert resolver.resolve("Atlantis") is None
    fake_nominatim.search_results["Atlantis, Australia"] = [SYDNEY]
    assert resolver.resolve("Atlantis") is not None
    assert len(fake_nominatim.calls_to("search")) == 2


def test_upstream_failure_is_retried_on_next_use(
    resolver: LocationResolver, fake_nominatim: FakeNominatim
) -> None:
    """Teste qu'un échec transitoire n'est pas mis en cache."""
    fake_nominatim.search_results["Sydney, NSW, Australia"] = [SYDNEY]
    fake_nominatim.status_code = 503
    assert resolver.resolve("Sydney, NSW") is None
    assert len(resolver.cache) == 0

    fake_nominatim.status_code = 200
    assert resolver.resolve("Sydney, NSW") == Coordinate(-33.8688, 151.2093)


def test_network_error_returns_none(
    resolver: LocationResolver, fake_nominatim: FakeNominatim
) -> None:
    """Teste qu'une erreur réseau est absorbée (None, rien en cache)."""
    fake_nominatim.network_error = True
    assert resolver.resolve("Sydney, NSW") is None
    assert len(resolver.cache) == 0


def test_malformed_result_returns_none(
    resolver: LocationResolver, fake_nominatim: FakeNominatim
) -> None:
    """Teste qu'un candidat sans coordonnées exploitables renvoie None."""
    fake_nominatim.search_results["Sydney, NSW, Australia"] = [{"display_name": "Sydney"}]
    assert resolver.resolve("Sydney, NSW") is None


def test_resolve_many_dedupes_and_skips_failures(
    resolver: LocationResolver, fake_nominatim: FakeNominatim
) -> None:
    """Teste la résolution en lot: adresses uniques, vides ignorées, échecs absents du résultat."""
    fake_nominatim.search_results["Sydney, NSW, Australia"] = [SYDNEY]
    fake_nominatim.search_results["Melbourne, VIC, Australia"] = [MELBOURNE]

    resolved = resolver.resolve_many(
        ["Sydney, NSW", "", None, "Melbourne, VIC", "Sydney, NSW", "Atlantis"]
    )

    assert set(resolved) == {"Sydney, NSW", "Melbourne, VIC"}
    queried = [r.url.params["q"] for r in fake_nominatim.calls_to("search")]
    assert queried == [
        "Sydney, NSW, Australia",
        "Melbourne, VIC, Australia",
        "Atlantis, Australia",
    ]
