"""Configuration de test pour pytest avec gestion des chemins.

Ce module ajoute la racine du projet au sys.path, fournit un identifiant factice avant l'import du
conteneur, et expose des fixtures communes (horloge figée, LLM factice).
"""

import os
import sys
from datetime import datetime, timezone

import pytest
import structlog

# Ensure project root is on sys.path so that
# imports like `from lifetime_analyzer...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Le conteneur vérifie l'identifiant à l'import: en fournir un factice
os.environ.setdefault("OPENAI_API_KEY", "test-key")

from lifetime_analyzer.domain.entities import UserInput  # noqa: E402
from tests.fakes import FakeLLM  # noqa: E402

FIXED_NOW = datetime(2025, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    """Horloge figée au 2025-10-19."""
    return lambda: FIXED_NOW


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def asha() -> UserInput:
    """Saisie valide de référence."""
    return UserInput(name="Asha", day="12", month="05", year="1990", country="India")


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Évite qu'un logger structlog mis en cache garde un flux de capture pytest déjà fermé."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
