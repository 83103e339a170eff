"""
Génère un rapport depuis la ligne de commande.

Exécute un cycle complet du contrôleur (validation, prompt, un appel au service de génération)
et affiche le markdown sur la sortie standard.

Codes de sortie: 0 succès, 1 rapport en erreur, 2 configuration manquante.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from lifetime_analyzer.core.container import Container
from lifetime_analyzer.core.logging import setup_logging
from lifetime_analyzer.core.settings import Settings
from lifetime_analyzer.domain.entities import SessionState, SessionStatus, UserInput
from lifetime_analyzer.domain.errors import ConfigurationError
from lifetime_analyzer.infra.llm.base import LLM
from lifetime_analyzer.services.report_controller import ReportController


async def run_once(user_input: UserInput, llm: LLM, min_year: int) -> SessionState:
    """Soumet la saisie et attend l'état final du contrôleur."""
    controller = ReportController(llm, min_year=min_year)
    task = controller.submit(user_input)
    if task is not None:
        await task
    return controller.state


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="AI LifeTime Analyzer report generator")
    parser.add_argument("--name", required=True)
    parser.add_argument("--day", required=True, help="Day of birth (DD)")
    parser.add_argument("--month", required=True, help="Month of birth (MM)")
    parser.add_argument("--year", required=True, help="Year of birth (YYYY)")
    parser.add_argument("--country", help="Country (defaults to DEFAULT_COUNTRY)")
    parser.add_argument("--model", help="Override LLM_MODEL")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    settings = Settings(LLM_MODEL=args.model) if args.model else Settings()
    container = Container(settings)
    try:
        llm = container.require_llm()
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    user_input = UserInput(
        name=args.name,
        day=args.day,
        month=args.month,
        year=args.year,
        country=args.country or settings.DEFAULT_COUNTRY,
    )
    state = asyncio.run(run_once(user_input, llm, settings.MIN_BIRTH_YEAR))
    if state.status is SessionStatus.SUCCESS:
        print(state.report)
        return 0
    print(state.error, file=sys.stderr)
    return 1


if __name__ == "__main__":  # pragma: no cover - script entry
    sys.exit(main())
