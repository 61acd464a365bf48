"""
Intake API — HTTP endpoints over in-memory intake sessions.

Endpoints:
  POST   /api/intake/sessions                          Start a session (greeting included)
  GET    /api/intake/sessions/{id}                     Record, completion, chat log
  POST   /api/intake/sessions/{id}/messages            Submit one finalized utterance
  PUT    /api/intake/sessions/{id}/fields/{field}      Direct form edit
  DELETE /api/intake/sessions/{id}                     Drop a session
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from rune.dependencies import get_session_store
from rune.intake.session import (
    IntakeSession,
    InvalidFieldError,
    SessionNotFoundError,
    SessionStore,
)
from rune.schemas.intake import (
    FieldEditRequest,
    MessageRequest,
    MessageResponse,
    SessionSnapshot,
)

logger = logging.getLogger("rune.api")

router = APIRouter(prefix="/api/intake", tags=["intake"])


def _load_session(store: SessionStore, session_id: str) -> IntakeSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")


@router.post("/sessions", response_model=SessionSnapshot, status_code=201)
async def create_session(store: SessionStore = Depends(get_session_store)):
    session = store.create()
    return SessionSnapshot.from_session(session)


@router.get("/sessions/{session_id}", response_model=SessionSnapshot)
async def get_session(
    session_id: str, store: SessionStore = Depends(get_session_store)
):
    return SessionSnapshot.from_session(_load_session(store, session_id))


@router.post("/sessions/{session_id}/messages", response_model=MessageResponse)
async def post_message(
    session_id: str,
    request: MessageRequest,
    store: SessionStore = Depends(get_session_store),
):
    """
    Run one finalized utterance (typed, or a final speech transcript)
    through the extraction engine and apply the updates to the session.
    """
    session = _load_session(store, session_id)

    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Message text is empty")

    result = await session.process_utterance(request.text)
    return MessageResponse(
        updates=result.updates,
        narrative=result.narrative,
        extracted=result.extracted,
        session=SessionSnapshot.from_session(session),
    )


@router.put("/sessions/{session_id}/fields/{field}", response_model=SessionSnapshot)
async def edit_field(
    session_id: str,
    field: str,
    request: FieldEditRequest,
    store: SessionStore = Depends(get_session_store),
):
    session = _load_session(store, session_id)
    try:
        await session.edit_field(field, request.value)
    except InvalidFieldError as exc:
        logger.warning("Rejected edit of %s on session %s: %s", field, session_id, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    return SessionSnapshot.from_session(session)


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str, store: SessionStore = Depends(get_session_store)
):
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"success": True, "session_id": session_id}
