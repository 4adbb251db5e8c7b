"""
Conteneur d'injection de dépendances.

Instancie les composants centraux (settings, dépôts, client du géocodeur, cache de résolution,
rate limiter, services) et les rattache à l'application (`app.state.container`). Chaque
application possède son propre conteneur: le cache et les compteurs de requêtes ne sont pas des
globales de module.
"""

import structlog

from housesit.apigw.rate_limit import FixedWindowRateLimiter, RateLimitConfig
from housesit.core.settings import Settings, get_settings
from housesit.domain.browse import BrowseService
from housesit.domain.geocode_cache import GeocodeCache
from housesit.domain.geocode_proxy import ForwardOptions, GeocodeProxy
from housesit.domain.location_resolver import LocationResolver
from housesit.domain.verification import VerificationService
from housesit.infra.document_store import LocalDocumentStore
from housesit.infra.http_clients import NominatimClient
from housesit.infra.repositories import (
    InMemoryProfileRepo,
    InMemoryRoleRepo,
    InMemoryUserRepo,
    load_seed,
)

log = structlog.get_logger(__name__)


class Container:
    def __init__(self, settings: Settings | None = None, geocoder: NominatimClient | None = None):
        self.settings = settings or get_settings()
        s = self.settings

        self.geocoder = geocoder or NominatimClient(
            base_url=s.NOMINATIM_BASE_URL,
            user_agent=s.NOMINATIM_USER_AGENT,
            timeout=s.NOMINATIM_TIMEOUT_S,
        )
        self.geocode_cache = GeocodeCache()
        self.rate_limiter = FixedWindowRateLimiter(
            RateLimitConfig(
                max_requests=s.GEOCODE_RATE_LIMIT,
                window_seconds=float(s.GEOCODE_RATE_WINDOW_S),
            )
        )
        self.geocode_proxy = GeocodeProxy(
            self.geocoder,
            ForwardOptions(
                country_suffix=s.GEOCODE_COUNTRY_SUFFIX,
                countrycodes=s.GEOCODE_COUNTRY_CODES or None,
                max_results=s.GEOCODE_MAX_RESULTS,
                min_length=s.GEOCODE_QUERY_MIN_LEN,
                max_length=s.GEOCODE_QUERY_MAX_LEN,
            ),
        )
        self.resolver = LocationResolver(
            self.geocoder,
            self.geocode_cache,
            country_suffix=s.GEOCODE_COUNTRY_SUFFIX,
            delay_s=s.GEOCODE_BATCH_DELAY_S,
        )

        # repositories
        self.user_repo = InMemoryUserRepo()
        self.role_repo = InMemoryRoleRepo()
        self.profile_repo = InMemoryProfileRepo()
        if s.SEED_DATA_PATH:
            load_seed(s.SEED_DATA_PATH, self.user_repo, self.role_repo, self.profile_repo)
            log.info("seed_loaded", path=s.SEED_DATA_PATH)

        self.browse = BrowseService(self.profile_repo, self.role_repo, self.resolver)
        self.verification = VerificationService(
            self.user_repo,
            self.role_repo,
            self.profile_repo,
            secret=s.JWT_SECRET,
            alg=s.JWT_ALG,
            public_base_url=s.PUBLIC_BASE_URL,
            url_ttl_s=s.DOCUMENT_URL_TTL_S,
        )
        self.documents = LocalDocumentStore(s.DOCUMENTS_DIR)
