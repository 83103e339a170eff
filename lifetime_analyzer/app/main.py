"""
Application principale FastAPI.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (contexte de requête, métriques, CORS)
- Traduire l'absence de configuration du service de génération en 503
- Monter les routers (santé, rapports, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lifetime_analyzer.api.routes_health import router as health_router
from lifetime_analyzer.api.routes_report import router as report_router
from lifetime_analyzer.app.metrics import PrometheusMiddleware, metrics_router
from lifetime_analyzer.core.container import container
from lifetime_analyzer.core.http_constants import HTTP_SERVICE_UNAVAILABLE
from lifetime_analyzer.core.logging import setup_logging
from lifetime_analyzer.domain.errors import ConfigurationError
from lifetime_analyzer.middlewares.request_context import RequestContextMiddleware


def handle_configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Réponse dédiée quand aucun identifiant n'est configuré (écran de configuration)."""
    return JSONResponse(
        status_code=HTTP_SERVICE_UNAVAILABLE,
        content={"code": "configuration_required", "message": str(exc)},
    )


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares utiles au debug/traçabilité
    - Publie les routes de santé, de rapports et de métriques
    """
    settings = container.settings
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(o).rstrip("/") for o in settings.CORS_ORIGINS],
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(ConfigurationError, handle_configuration_error)
    app.include_router(health_router)
    app.include_router(report_router)
    app.include_router(metrics_router)
    return app


app = create_app()
