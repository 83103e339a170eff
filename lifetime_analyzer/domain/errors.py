"""Hiérarchie d'erreurs du domaine et messages présentés à l'utilisateur.

- Erreurs de validation locales (`MissingField`, `MalformedDate`): jamais envoyées au service.
- Erreurs de génération (`GenerationError`) classées par `FailureKind`.
- `ConfigurationError`: identifiant absent au démarrage, hors taxonomie par soumission.
"""

from __future__ import annotations

from enum import Enum

MISSING_FIELD_MESSAGE = "Please fill in all the fields."
MALFORMED_DATE_MESSAGE = (
    "Please enter a valid date of birth (DD/MM/YYYY) that is not in the future."
)
UNAUTHORIZED_MESSAGE = "The provided API Key is invalid. Please check your key."
SERVICE_ERROR_PREFIX = "API Error"
UNKNOWN_ERROR_MESSAGE = (
    "An unknown error occurred while generating the report. Please try again."
)


class ValidationFailure(ValueError):
    """Saisie refusée avant tout appel externe."""

    reason = "invalid"

    @property
    def user_message(self) -> str:
        return str(self)


class MissingField(ValidationFailure):
    """Champ requis vide ou composé uniquement d'espaces."""

    reason = "missing_field"

    def __init__(self, field: str) -> None:
        super().__init__(MISSING_FIELD_MESSAGE)
        self.field = field


class MalformedDate(ValidationFailure):
    """Jour/mois/année non numériques, date inexistante, trop ancienne ou future."""

    reason = "malformed_date"

    def __init__(self, detail: str, message: str = MALFORMED_DATE_MESSAGE) -> None:
        super().__init__(message)
        self.detail = detail


class FailureKind(str, Enum):
    """Classification des échecs du service de génération."""

    UNAUTHORIZED = "unauthorized"
    SERVICE_ERROR = "service_error"
    UNREACHABLE = "unreachable"
    UNKNOWN = "unknown"


class GenerationError(Exception):
    """Échec d'un appel au service de génération."""

    def __init__(self, kind: FailureKind, detail: str = "") -> None:
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
        self.kind = kind
        self.detail = detail

    @property
    def user_message(self) -> str:
        return user_message(self.kind, self.detail)


class ConfigurationError(RuntimeError):
    """Configuration incomplète (identifiant du service absent)."""


def user_message(kind: FailureKind, detail: str = "") -> str:
    """Message sûr à afficher pour un type d'échec donné.

    Le détail n'est repris que pour `SERVICE_ERROR`, où il provient du service lui-même.
    """
    if kind is FailureKind.UNAUTHORIZED:
        return UNAUTHORIZED_MESSAGE
    if kind is FailureKind.SERVICE_ERROR:
        return f"{SERVICE_ERROR_PREFIX}: {detail}" if detail else SERVICE_ERROR_PREFIX
    return UNKNOWN_ERROR_MESSAGE
