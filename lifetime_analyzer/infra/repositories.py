"""
Dépôt des sessions de rapport.

Chaque session possède son propre `ReportController`. Stockage en mémoire uniquement: les
rapports ne sont pas persistés et disparaissent avec le processus.
"""

import uuid
from collections import OrderedDict
from collections.abc import Callable

from lifetime_analyzer.services.report_controller import ReportController


class InMemorySessionRepo:
    """
    Dépôt de sessions en mémoire, borné.

    Au-delà de `max_sessions`, la session la plus ancienne est évincée.
    """

    def __init__(self, max_sessions: int = 1000):
        """Initialise une base mémoire vide."""
        self.max_sessions = max(1, max_sessions)
        self._db: OrderedDict[str, ReportController] = OrderedDict()

    def create(self, factory: Callable[[], ReportController]) -> tuple[str, ReportController]:
        """Crée une session à partir de la fabrique fournie et renvoie (id, contrôleur)."""
        session_id = uuid.uuid4().hex
        self._db[session_id] = factory()
        while len(self._db) > self.max_sessions:
            self._db.popitem(last=False)
        return session_id, self._db[session_id]

    def get(self, session_id: str) -> ReportController | None:
        """Retourne le contrôleur d'une session, ou None si elle est absente."""
        return self._db.get(session_id)

    def __len__(self) -> int:
        return len(self._db)
