"""Interface de base pour les services de génération de texte."""

from __future__ import annotations

from abc import ABC, abstractmethod


class LLM(ABC):
    """Capacité de génération opaque: un prompt en entrée, un texte en sortie.

    Les implémentations effectuent exactement un appel sortant par invocation (ni retry ni
    cache) et lèvent `GenerationError` en cas d'échec.
    """

    model: str = "unknown"

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Génère le texte du rapport pour le prompt donné."""
        ...
