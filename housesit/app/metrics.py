"""
Métriques Prometheus pour l'application.

Ce module définit les métriques Prometheus utilisées pour le monitoring du proxy de géocodage, du
cache de résolution et du rate limiting, ainsi que l'endpoint `/metrics`.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter(tags=["metrics"])

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Geocode proxy
GEOCODE_REQUESTS = Counter(
    "geocode_requests_total",
    "Geocode proxy requests by mode and outcome",
    ["mode", "outcome"],
)
GEOCODE_UPSTREAM_LATENCY = Histogram(
    "geocode_upstream_latency_seconds",
    "Latency of upstream geocoder calls",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)
GEOCODE_UPSTREAM_ERRORS = Counter(
    "geocode_upstream_errors_total",
    "Upstream geocoder failures",
    ["endpoint", "reason"],
)

# Location cache
GEOCODE_CACHE_HITS = Counter("geocode_cache_hits_total", "Location cache hits")
GEOCODE_CACHE_MISSES = Counter("geocode_cache_misses_total", "Location cache misses")

# Rate limiting (no client label: unbounded cardinality)
RATE_LIMIT_BLOCKS = Counter(
    "rate_limit_blocks_total",
    "Requests blocked by the per-client rate limiter",
    ["route"],
)


def route_label(request: Request) -> str:
    """Retourne le gabarit de route (ex. `/browse/profiles/{profile_id}/nearby`)."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or "unmatched"


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware Prometheus pour mesurer les métriques HTTP.

    Collecte les métriques de comptage des requêtes et de latence par route pour l'exposition
    Prometheus.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Traite une requête HTTP et collecte les métriques.

        Args:
            request: Requête HTTP entrante.
            call_next: Fonction pour appeler le middleware suivant.

        Returns:
            Response: Réponse HTTP avec métriques collectées.
        """
        start = time.perf_counter()
        response: Response = await call_next(request)
        route = route_label(request)
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
