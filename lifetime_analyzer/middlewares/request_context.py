"""Middleware Starlette de contexte de requête.

Ajoute l'en-tête X-Request-ID (repris de la requête ou généré), le lie aux contextvars de structlog
pour que tous les logs de la requête le portent, et mesure la durée de traitement
(en-tête X-Process-Time-ms).
"""

import time
from collections.abc import Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

log = structlog.get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Identifiant de requête, contexte de log et temps de traitement."""

    def __init__(
        self,
        app: ASGIApp,
        request_id_header: str = "X-Request-ID",
        timing_header: str = "X-Process-Time-ms",
    ) -> None:
        """Initialise le middleware avec les noms d'en-têtes spécifiés.

        Args:
            app: Application ASGI à wrapper.
            request_id_header: En-tête HTTP portant l'identifiant de requête.
            timing_header: En-tête HTTP portant la durée de traitement en millisecondes.
        """
        super().__init__(app)
        self.request_id_header = request_id_header
        self.timing_header = timing_header

    async def dispatch(self, request, call_next: Callable):
        request_id = request.headers.get(self.request_id_header) or str(uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers[self.request_id_header] = request_id
        response.headers[self.timing_header] = str(duration_ms)
        log.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
            request_id=request_id,
        )
        return response
