"""Dérivation des faits calendaires qui paramètrent le prompt.

`now` est toujours injecté: même saisie et même `now` donnent le même résultat. Un `datetime` est
réduit à sa date calendaire, sans conversion de fuseau.
"""

from __future__ import annotations

from datetime import date, datetime

from lifetime_analyzer.domain.entities import GenerationRequest, TemporalFacts, UserInput


def as_calendar_date(now: date | datetime) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def derive_facts(user_input: UserInput, now: date | datetime) -> TemporalFacts:
    """Calcule `birth_date`, `birth_year` et `current_date_iso` pour une saisie validée."""
    birth_date = user_input.birth_date()
    return TemporalFacts(
        birth_date=birth_date,
        birth_year=birth_date.year,
        current_date_iso=as_calendar_date(now).isoformat(),
    )


def build_request(user_input: UserInput, now: date | datetime) -> GenerationRequest:
    """Assemble la requête de génération immuable (saisie nettoyée + faits dérivés)."""
    facts = derive_facts(user_input, now)
    return GenerationRequest(
        name=user_input.name.strip(),
        country=user_input.country.strip(),
        birth_date=facts.birth_date,
        birth_year=facts.birth_year,
        current_date=facts.current_date_iso,
    )
