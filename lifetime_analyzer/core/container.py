"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, client de génération, dépôt de sessions) et expose
un singleton `container` utilisé par l'API et les scripts. Le client de génération n'est construit
qu'ici puis injecté dans chaque `ReportController`.
"""

import os

import structlog

from lifetime_analyzer.core.settings import Settings, get_settings
from lifetime_analyzer.domain.errors import ConfigurationError
from lifetime_analyzer.infra.llm.base import LLM
from lifetime_analyzer.infra.llm.openai_client import OpenAILLM
from lifetime_analyzer.infra.repositories import InMemorySessionRepo
from lifetime_analyzer.services.report_controller import ReportController

CREDENTIAL_KEY = "OPENAI_API_KEY"
CONFIGURATION_HINT = (
    f"The AI LifeTime Analyzer requires an API Key to function, but it has not been configured. "
    f"Set the {CREDENTIAL_KEY} environment variable (or add it to the .env file) and restart "
    f"the application."
)

log = structlog.get_logger(__name__)


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.sessions = InMemorySessionRepo(max_sessions=self.settings.MAX_SESSIONS)
        self.llm: LLM | None = None
        # Vérification unique au démarrage: sans identifiant, aucune soumission n'est permise
        api_key = self.resolve_secret(CREDENTIAL_KEY)
        if api_key:
            self.llm = OpenAILLM(
                api_key=api_key,
                model=self.settings.LLM_MODEL,
                base_url=self.settings.OPENAI_BASE_URL,
                temperature=self.settings.LLM_TEMPERATURE,
            )
        else:
            log.warning("llm_not_configured", key=CREDENTIAL_KEY)

    @property
    def configured(self) -> bool:
        return self.llm is not None

    def require_llm(self) -> LLM:
        """Retourne le client de génération ou lève `ConfigurationError`."""
        if self.llm is None:
            raise ConfigurationError(CONFIGURATION_HINT)
        return self.llm

    def new_controller(self) -> ReportController:
        """Construit un contrôleur de session relié au client de génération configuré."""
        return ReportController(self.require_llm(), min_year=self.settings.MIN_BIRTH_YEAR)

    def resolve_secret(self, key: str) -> str:
        """Résolution d'un secret: env → settings.

        Ne journalise jamais la valeur du secret.
        """
        env_val = os.getenv(key)
        if env_val:
            return env_val
        return getattr(self.settings, key, "") or ""


container = Container()
