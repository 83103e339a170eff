"""
Validation de la saisie du formulaire.

Fonction pure: aucune dépendance à l'horloge (la date du jour est passée en paramètre), aucun
effet de bord. Lève `MissingField` ou `MalformedDate`, sinon retourne la date de naissance.
"""

from __future__ import annotations

from datetime import date

from lifetime_analyzer.domain.entities import UserInput
from lifetime_analyzer.domain.errors import MalformedDate, MissingField

REQUIRED_FIELDS = ("name", "day", "month", "year", "country")
DEFAULT_MIN_YEAR = 1900

# Longueur maximale de chaque composante, comme dans le formulaire (DD, MM, YYYY)
_MAX_DIGITS = {"day": 2, "month": 2, "year": 4}


def validate(user_input: UserInput, today: date, min_year: int = DEFAULT_MIN_YEAR) -> date:
    """Valide la saisie et retourne la date de naissance composée.

    Règles:
    - tous les champs sont requis (les espaces seuls comptent comme vides);
    - jour/mois/année sont des chaînes de chiffres qui forment une date réelle;
    - l'année n'est pas antérieure à `min_year`;
    - la date n'est pas postérieure à `today`.
    """
    for field in REQUIRED_FIELDS:
        if not getattr(user_input, field).strip():
            raise MissingField(field)

    parts: dict[str, int] = {}
    for field, max_digits in _MAX_DIGITS.items():
        raw = getattr(user_input, field).strip()
        # chiffres ASCII uniquement: `isdigit` accepte aussi exposants et chiffres arabes-indiens
        if not (raw.isascii() and raw.isdigit()) or len(raw) > max_digits:
            raise MalformedDate(f"{field}_not_numeric")
        parts[field] = int(raw)

    try:
        birth_date = date(parts["year"], parts["month"], parts["day"])
    except ValueError as exc:
        raise MalformedDate("not_a_calendar_date") from exc

    if birth_date.year < min_year:
        raise MalformedDate(
            "year_too_early",
            f"Please enter a year of birth between {min_year} and {today.year}.",
        )
    if birth_date > today:
        raise MalformedDate("date_in_future", "Date of birth cannot be in the future.")
    return birth_date
