"""
Métriques Prometheus pour l'application.

Ce module définit les métriques HTTP et métier (générations de rapports, rejets de validation,
tokens consommés) et expose l'endpoint `/metrics`.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Business metrics
REPORT_GENERATIONS = Counter(
    "report_generations_total",
    "Report generations by final outcome (success or failure kind)",
    ["outcome"],
)
REPORT_LATENCY = Histogram(
    "report_generation_seconds",
    "Latency of one report generation call",
    buckets=[0.5, 1, 2.5, 5, 10, 20, 40, 80],
)
VALIDATION_REJECTS = Counter(
    "report_validation_rejects_total",
    "Submissions rejected locally before any external call",
    ["reason"],
)
LLM_TOKENS_TOTAL = Counter(
    "llm_tokens_total",
    "Accumulated LLM tokens",
    ["model"],
)


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collecte le nombre de requêtes et la latence par route."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        route = request.scope.get("route")
        path = getattr(route, "path", None) or request.scope.get("path", "unknown")
        REQUEST_COUNT.labels(request.method, path, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(path).observe(time.perf_counter() - start)
        return response
