"""
Endpoint de santé pour vérifier la disponibilité de l'API.

Expose `/health` avec l'état de configuration du service de génération (jamais la clé).
"""

from fastapi import APIRouter

from lifetime_analyzer.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Vérifie la disponibilité de l'API et la présence d'un service de génération."""
    llm = container.llm
    return {
        "status": "ok",
        "configured": container.configured,
        "model": getattr(llm, "model", None),
        "sessions": len(container.sessions),
    }
