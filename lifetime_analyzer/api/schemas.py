# Schémas Pydantic exposés par l'API (requêtes et réponses).

from pydantic import BaseModel, field_validator

from lifetime_analyzer.domain.entities import SessionStatus, UserInput
from lifetime_analyzer.services.report_controller import ReportController


class ReportRequest(BaseModel):
    """Saisie du formulaire.

    Champs:
    - name: str
    - day, month, year: str (chiffres; les entiers JSON sont acceptés et convertis)
    - country: str | None (pays par défaut de la configuration si absent)

    Les champs vides sont acceptés ici: la validation métier les refuse avec un message dédié.
    """

    name: str = ""
    day: str = ""
    month: str = ""
    year: str = ""
    country: str | None = None

    @field_validator("day", "month", "year", mode="before")
    @classmethod
    def _digits_as_text(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_user_input(self, default_country: str) -> UserInput:
        country = self.country if self.country is not None else default_country
        return UserInput(
            name=self.name, day=self.day, month=self.month, year=self.year, country=country
        )


class SessionResponse(BaseModel):
    """État d'une session de rapport.

    Champs:
    - id: str (identifiant de session)
    - status: idle | loading | success | error
    - report: str | None (markdown, si succès)
    - error: str | None (message à afficher, si erreur)
    - accepted: bool | None (la dernière commande a-t-elle lancé une génération)
    - birth_year / current_date: faits de la dernière génération lancée
    """

    id: str
    status: SessionStatus
    report: str | None = None
    error: str | None = None
    accepted: bool | None = None
    birth_year: int | None = None
    current_date: str | None = None

    @classmethod
    def from_controller(
        cls, session_id: str, controller: ReportController, accepted: bool | None = None
    ) -> "SessionResponse":
        state = controller.state
        request = controller.last_request
        return cls(
            id=session_id,
            status=state.status,
            report=state.report,
            error=state.error,
            accepted=accepted,
            birth_year=request.birth_year if request else None,
            current_date=request.current_date if request else None,
        )


class ReportResponse(BaseModel):
    """Résultat d'une génération ponctuelle (`POST /report`)."""

    status: SessionStatus
    report: str | None = None
    error: str | None = None
