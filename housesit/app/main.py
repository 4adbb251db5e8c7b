"""
Application principale FastAPI.

Ce module assemble tous les composants de l'application : middlewares, gestionnaires d'erreurs,
routes et métriques.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI et lui rattacher son conteneur
- Ajouter les middlewares (request id, Prometheus, CORS)
- Monter les routers (santé, géocodage, navigation, administration, documents, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from housesit.api.routes_admin import router as admin_router
from housesit.api.routes_browse import router as browse_router
from housesit.api.routes_documents import router as documents_router
from housesit.api.routes_geocode import router as geocode_router
from housesit.api.routes_health import router as health_router
from housesit.apigw.errors import register_error_handlers
from housesit.app.metrics import PrometheusMiddleware, metrics_router
from housesit.core.container import Container
from housesit.core.logging import setup_logging
from housesit.middlewares.request_id import RequestIDMiddleware


def create_app(container: Container | None = None) -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Construit (ou reçoit) le conteneur: cache de résolution et compteurs de rate limit lui
      appartiennent, une application = un état
    - Ajoute les middlewares et les gestionnaires d'erreurs `{"error": ...}`
    - Publie les routes
    """
    container = container or Container()
    settings = container.settings
    setup_logging(debug=settings.APP_DEBUG)

    # No debug=: Starlette's debug page would replace the {"error": ...} 500 response
    app = FastAPI(title=settings.APP_NAME)
    app.state.container = container

    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(geocode_router)
    app.include_router(browse_router)
    app.include_router(admin_router)
    app.include_router(documents_router)
    app.include_router(metrics_router)
    return app


app = create_app()


def main() -> None:
    """Lance le serveur uvicorn avec les paramètres de l'application."""
    import uvicorn  # noqa: PLC0415

    settings = app.state.container.settings
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)


if __name__ == "__main__":
    main()
