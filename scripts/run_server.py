"""
Script de lancement du serveur HTTP.

Démarre l'application FastAPI avec uvicorn sur `APP_HOST`/`APP_PORT`. Sans identifiant configuré,
le serveur démarre quand même et répond 503 (`configuration_required`) aux routes de rapport.
"""

import uvicorn

from lifetime_analyzer.app.main import app
from lifetime_analyzer.core.container import container


def main():
    """Point d'entrée principal: lance uvicorn avec les paramètres de la configuration."""
    settings = container.settings
    uvicorn.run(
        app,
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
