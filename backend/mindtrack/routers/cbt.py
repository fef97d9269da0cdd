# cbt router: ai thought analysis and the guided journaling session
# /cbt/analyze is a single classifier call, /cbt/sessions drives the step-by-step flow

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from mindtrack.errors import ClassificationFailed, NotFoundError, StorageError
from mindtrack.models.cbt import (
    CBTAnalyzeRequest,
    SessionFieldsUpdate,
    SessionFieldsView,
    SessionStart,
    SessionSubmitResponse,
    SessionView,
    ThoughtDiagnosis,
)
from mindtrack.dependencies import get_journal_service
from mindtrack.routers.journal import doc_to_entry
from mindtrack.services.cbt_session import CBTSession, SessionRegistry, get_session_registry
from mindtrack.services.classifier import ThoughtClassifier, get_classifier
from mindtrack.services.journal_service import JournalService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/cbt", tags=["cbt"])


def _session_view(session: CBTSession) -> SessionView:
    state = session.state
    fields = state.fields
    return SessionView(
        sessionId=session.session_id,
        userId=session.user_id,
        step=state.step.value,
        phase=state.phase.value,
        fields=SessionFieldsView(
            situation=fields.situation,
            emotion=fields.emotion,
            thought=fields.thought,
            challenge=fields.challenge,
            reframe=fields.reframe,
        ),
        diagnosis=state.diagnosis,
        analysisAttempted=state.analysis_attempted,
        errors=dict(state.errors),
        warning=state.warning,
    )


def _get_session(registry: SessionRegistry, session_id: str) -> CBTSession:
    try:
        return registry.get(session_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )


@router.post("/analyze", response_model=ThoughtDiagnosis)
async def analyze_thought(
    body: CBTAnalyzeRequest,
    classifier: ThoughtClassifier = Depends(get_classifier),
):
    """classify the thought's cognitive distortion and suggest a challenge and reframe"""
    try:
        return await classifier.classify(body.situation, body.emotion, body.thought)
    except ClassificationFailed:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate AI response",
        )


# guided session

@router.post("/sessions", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def start_session(
    body: SessionStart,
    registry: SessionRegistry = Depends(get_session_registry),
    classifier: ThoughtClassifier = Depends(get_classifier),
    journals: JournalService = Depends(get_journal_service),
):
    session = registry.create(body.user_id, classifier, journals)
    return _session_view(session)


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    return _session_view(_get_session(registry, session_id))


@router.put("/sessions/{session_id}/fields", response_model=SessionView)
async def update_session_fields(
    session_id: str,
    body: SessionFieldsUpdate,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """overwrite any of the collected fields, challenge/reframe only on the last step"""
    session = _get_session(registry, session_id)
    session.update_fields(**body.model_dump(exclude_unset=True))
    return _session_view(session)


@router.post("/sessions/{session_id}/next", response_model=SessionView)
async def next_step(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """advance one step. invalid input keeps the step and fills `errors`.
    leaving THOUGHT runs the classifier before the last step is returned."""
    session = _get_session(registry, session_id)
    await session.advance()
    return _session_view(session)


@router.post("/sessions/{session_id}/back", response_model=SessionView)
async def previous_step(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    session = _get_session(registry, session_id)
    session.back()
    return _session_view(session)


@router.post("/sessions/{session_id}/submit", response_model=SessionSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """persist the entry. on success the session starts over, on failure it keeps its fields."""
    session = _get_session(registry, session_id)
    try:
        entry = await session.submit()
    except StorageError as e:
        logger.error(f"Session {session_id}: could not store journal entry: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create journal entry",
        )
    return SessionSubmitResponse(entry=doc_to_entry(entry), session=_session_view(session))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """cancel the session and drop everything it collected"""
    try:
        registry.discard(session_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
