from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from rune.intake.record import FORM_FIELDS, FieldUpdate, PatientRecord
from rune.intake.session import ChatMessage, IntakeSession


class MessageRequest(BaseModel):
    """Request body for POST /api/intake/sessions/{id}/messages."""

    text: str


class FieldEditRequest(BaseModel):
    """Request body for PUT /api/intake/sessions/{id}/fields/{field}."""

    value: Optional[Any] = None


class SessionSnapshot(BaseModel):
    session_id: str
    record: PatientRecord
    filled_fields: list[str] = Field(default_factory=list)
    completion_percent: float = 0.0
    missing_fields: list[str] = Field(default_factory=list)
    is_complete: bool = False
    messages: list[ChatMessage] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session: IntakeSession) -> SessionSnapshot:
        filled = session.record.filled_fields()
        return cls(
            session_id=session.session_id,
            record=session.record,
            filled_fields=[f for f in FORM_FIELDS if f in filled],
            completion_percent=round(session.record.completion_percent(), 1),
            missing_fields=session.record.get_missing_required(),
            is_complete=session.record.is_complete(),
            messages=session.messages,
        )


class MessageResponse(BaseModel):
    """Response for POST /api/intake/sessions/{id}/messages."""

    updates: list[FieldUpdate] = Field(default_factory=list)
    narrative: str = ""
    extracted: list[str] = Field(default_factory=list)
    session: SessionSnapshot
