"""
Client de génération basé sur le SDK OpenAI (asynchrone).

- Un seul appel `chat.completions` par invocation, sans retry (max_retries=0) ni cache.
- Tout endpoint compatible OpenAI est utilisable via `base_url` (ex. Gemini).
- Les exceptions du SDK sont traduites en `GenerationError` classée par `FailureKind`.
"""

from __future__ import annotations

from typing import Any

import openai
import structlog
from openai import AsyncOpenAI

from lifetime_analyzer.app.metrics import LLM_TOKENS_TOTAL
from lifetime_analyzer.domain.errors import FailureKind, GenerationError
from lifetime_analyzer.infra.llm.base import LLM

# Message renvoyé par les endpoints Google pour une clé refusée (HTTP 400, pas 401)
INVALID_KEY_MARKER = "API key not valid"

log = structlog.get_logger(__name__)


class OpenAILLM(LLM):
    """Service de génération via l'API chat.completions."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        temperature: float | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialise le client; `client` permet d'injecter un double de test."""
        self.model = model
        self.temperature = temperature
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    async def generate(self, prompt: str) -> str:
        """Envoie le prompt et retourne le texte généré, ou lève `GenerationError`."""
        kwargs: dict[str, Any] = {}
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                **kwargs,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise GenerationError(FailureKind.UNAUTHORIZED, _detail(exc)) from exc
        except openai.APIConnectionError as exc:
            raise GenerationError(FailureKind.UNREACHABLE, _detail(exc)) from exc
        except openai.APIError as exc:
            detail = _detail(exc)
            if INVALID_KEY_MARKER in detail:
                raise GenerationError(FailureKind.UNAUTHORIZED, detail) from exc
            raise GenerationError(FailureKind.SERVICE_ERROR, detail) from exc

        text = _extract_text(resp)
        if not text:
            raise GenerationError(FailureKind.SERVICE_ERROR, "The model returned an empty response.")
        usage = self._extract_usage_dict(resp)
        if usage.get("total_tokens"):
            LLM_TOKENS_TOTAL.labels(model=self.model).inc(usage["total_tokens"])
        log.debug("llm_generation_ok", model=self.model, chars=len(text), **usage)
        return text

    def _extract_usage_dict(self, resp: Any) -> dict[str, int]:
        """
        Extrait les infos d'usage depuis la réponse OpenAI.

        Toujours un dict.
        """
        usage = getattr(resp, "usage", None)
        if not usage:
            return {}
        out: dict[str, int] = {}
        for key in ("prompt_tokens", "completion_tokens", "total_tokens"):
            val = getattr(usage, key, None)
            if isinstance(val, int):
                out[key] = val
        return out


def _extract_text(resp: Any) -> str:
    choices = getattr(resp, "choices", None) or []
    if not choices:
        return ""
    content = getattr(getattr(choices[0], "message", None), "content", None)
    return str(content).strip() if content else ""


def _detail(exc: openai.APIError) -> str:
    return str(getattr(exc, "message", "") or exc)
