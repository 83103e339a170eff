"""
Routes du cycle de vie des rapports.

Ce module expose la couche de présentation du contrôleur: création de session, soumission du
formulaire, relance, remise à zéro et lecture de l'état; plus une génération ponctuelle `/report`.
Toutes les routes exigent un service de génération configuré (sinon 503, voir `app.main`).
"""

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from lifetime_analyzer.api.schemas import ReportRequest, ReportResponse, SessionResponse
from lifetime_analyzer.core.container import container
from lifetime_analyzer.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_CREATED,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_UNPROCESSABLE_ENTITY,
)
from lifetime_analyzer.domain.entities import SessionStatus
from lifetime_analyzer.services.report_controller import ReportController

router = APIRouter(tags=["report"])

_WAIT_QUERY = Query(False, description="Attendre la fin de la génération avant de répondre")


def _get_session(session_id: str) -> ReportController:
    controller = container.sessions.get(session_id)
    if controller is None:
        raise HTTPException(status_code=HTTP_NOT_FOUND, detail="session_not_found")
    return controller


@router.post("/sessions", response_model=SessionResponse, status_code=HTTP_CREATED)
def create_session():
    """Crée une session à l'état `idle`."""
    session_id, controller = container.sessions.create(container.new_controller)
    return SessionResponse.from_controller(session_id, controller)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str):
    """Retourne l'état courant de la session."""
    return SessionResponse.from_controller(session_id, _get_session(session_id))


@router.post("/sessions/{session_id}/submit", response_model=SessionResponse)
async def submit(session_id: str, payload: ReportRequest, wait: bool = _WAIT_QUERY):
    """
    Soumet le formulaire.

    Ignoré si une génération est déjà en cours (`accepted: false`, état `loading` inchangé).
    Une saisie invalide passe la session en `error` sans appel externe.
    """
    controller = _get_session(session_id)
    task = controller.submit(payload.to_user_input(container.settings.DEFAULT_COUNTRY))
    if task is not None and wait:
        await task
    return SessionResponse.from_controller(session_id, controller, accepted=task is not None)


@router.post("/sessions/{session_id}/retry", response_model=SessionResponse)
async def retry(session_id: str, wait: bool = _WAIT_QUERY):
    """Relance la génération avec la dernière saisie; sans effet hors de l'état `error`."""
    controller = _get_session(session_id)
    task = controller.retry()
    if task is not None and wait:
        await task
    return SessionResponse.from_controller(session_id, controller, accepted=task is not None)


@router.post("/sessions/{session_id}/reset", response_model=SessionResponse)
def reset(session_id: str):
    """Remet la session à `idle`; un résultat encore attendu sera ignoré."""
    controller = _get_session(session_id)
    controller.reset()
    return SessionResponse.from_controller(session_id, controller)


@router.post("/report", response_model=ReportResponse)
async def generate_report(payload: ReportRequest):
    """
    Génère un rapport en une seule requête.

    Retour:
    - 200 avec le markdown en cas de succès;
    - 422 si la saisie est refusée (aucun appel externe);
    - 502 si le service de génération a échoué.
    """
    controller = container.new_controller()
    task = controller.submit(payload.to_user_input(container.settings.DEFAULT_COUNTRY))
    if task is not None:
        await task
    state = controller.state
    body = ReportResponse(status=state.status, report=state.report, error=state.error)
    if state.status is SessionStatus.SUCCESS:
        status_code = HTTP_OK
    elif task is None:
        status_code = HTTP_UNPROCESSABLE_ENTITY
    else:
        status_code = HTTP_BAD_GATEWAY
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
