"""
Entités du domaine métier.

Ce module définit les données saisies dans le formulaire, les faits temporels dérivés, la requête
de génération et l'état de session observé par la couche de présentation.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict


class UserInput(BaseModel):
    """Saisie du formulaire: nom, date de naissance (jour/mois/année séparés) et pays.

    Les valeurs restent des chaînes brutes; la validation a lieu à la soumission.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    day: str = ""
    month: str = ""
    year: str = ""
    country: str = ""

    def birth_date(self) -> date:
        """Date de naissance composée; la saisie doit avoir été validée."""
        return date(int(self.year.strip()), int(self.month.strip()), int(self.day.strip()))


class TemporalFacts(BaseModel):
    """Faits calendaires qui paramètrent le prompt."""

    model_config = ConfigDict(frozen=True)

    birth_date: date
    birth_year: int
    current_date_iso: str


class GenerationRequest(BaseModel):
    """Requête de génération immuable, entièrement dérivée de la saisie et de `now`."""

    model_config = ConfigDict(frozen=True)

    name: str
    country: str
    birth_date: date
    birth_year: int
    current_date: str


class SessionStatus(str, Enum):
    """Vue que l'interface doit afficher."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class SessionState(BaseModel):
    """État de session: exactement un statut, avec le rapport ou le message d'erreur associé."""

    model_config = ConfigDict(frozen=True)

    status: SessionStatus = SessionStatus.IDLE
    report: str | None = None
    error: str | None = None

    @classmethod
    def idle(cls) -> "SessionState":
        return cls(status=SessionStatus.IDLE)

    @classmethod
    def loading(cls) -> "SessionState":
        return cls(status=SessionStatus.LOADING)

    @classmethod
    def success(cls, report: str) -> "SessionState":
        return cls(status=SessionStatus.SUCCESS, report=report)

    @classmethod
    def failed(cls, message: str) -> "SessionState":
        return cls(status=SessionStatus.ERROR, error=message)
