"""
Intake Sessions — one patient record and chat log per browser session.

Utterances for a session are processed one at a time: the session lock is
held across read → extract → apply, so the write guards of utterance N+1
always see the updates of utterance N.  Separate sessions never share
state and run independently.

Sessions live in memory only; nothing is persisted.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from rune import settings
from rune.intake.engine import ExtractionResult, extract
from rune.intake.record import FORM_FIELDS, PatientRecord, calculate_age
from rune.intake.rules import ExtractionRules
from rune.intake.validators import (
    normalize_gender,
    normalize_mobile,
    validate_age,
    validate_dob,
)

logger = logging.getLogger("rune.intake.session")


def _now() -> datetime:
    return datetime.now(timezone.utc)


GREETING = (
    "Hello! I'm {assistant}, your AI medical assistant. I'll help you fill out "
    "your medical information form. You can speak naturally, and I'll extract "
    "the relevant information automatically. Please tell me about yourself and "
    "your medical concerns."
)


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    text: str
    sender: Sender
    timestamp: datetime = Field(default_factory=_now)


class SessionNotFoundError(Exception):
    pass


class InvalidFieldError(ValueError):
    """A direct edit named an unknown field or carried an unusable value."""


class IntakeSession:
    """
    Cumulative record + append-only message log for one intake conversation.

    Usage:
        session = IntakeSession()
        result = await session.process_utterance("I'm 45 years old")
        session.record.age   # 45
    """

    def __init__(
        self,
        session_id: str | None = None,
        rules: ExtractionRules | None = None,
        processing_delay: float = 0.0,
    ) -> None:
        self.session_id = session_id or uuid4().hex
        self.record = PatientRecord()
        self.created = _now()
        self.last_updated = self.created
        self._messages: list[ChatMessage] = []
        self._rules = rules
        self._processing_delay = processing_delay
        self._lock = asyncio.Lock()
        self._append(
            GREETING.format(assistant=settings.ASSISTANT_NAME), Sender.ASSISTANT
        )

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    @property
    def is_processing(self) -> bool:
        return self._lock.locked()

    def _append(self, text: str, sender: Sender) -> ChatMessage:
        message = ChatMessage(text=text, sender=sender)
        self._messages.append(message)
        return message

    def touch(self) -> None:
        self.last_updated = _now()

    async def process_utterance(
        self, text: str, today: date | None = None
    ) -> ExtractionResult:
        """Log the user's utterance, extract, apply updates, log the reply."""
        async with self._lock:
            self._append(text, Sender.USER)
            if self._processing_delay > 0:
                await asyncio.sleep(self._processing_delay)

            result = extract(text, self.record, self._rules, today)
            self.record.apply_all(result.updates)
            self._append(result.narrative, Sender.ASSISTANT)
            self.touch()

            logger.info(
                "Session %s: %d update(s), %d field(s) still missing",
                self.session_id, len(result.updates), len(result.missing),
            )
            return result

    async def edit_field(
        self, field: str, value: Any, today: date | None = None
    ) -> PatientRecord:
        """
        Direct form edit.  Bypasses the write guard; an empty value clears
        the field.  Setting date_of_birth recomputes age.
        """
        if field not in FORM_FIELDS:
            raise InvalidFieldError(f"Unknown field: {field}")

        async with self._lock:
            if value is None or (isinstance(value, str) and not value.strip()):
                setattr(self.record, field, None)
            else:
                coerced = _coerce_field_value(field, value, today)
                setattr(self.record, field, coerced)
                if field == "date_of_birth":
                    self.record.age = calculate_age(coerced, today)
            self.touch()
            logger.info("Session %s: %s edited directly", self.session_id, field)
            return self.record


def _coerce_field_value(field: str, value: Any, today: date | None) -> Any:
    if field == "age":
        age = validate_age(value)
        if age is None:
            raise InvalidFieldError(f"Age must be a whole number from 1 to 149, got {value!r}")
        return age

    if field == "date_of_birth":
        if isinstance(value, date):
            dob = value
        else:
            try:
                dob = date.fromisoformat(str(value).strip())
            except ValueError as exc:
                raise InvalidFieldError(
                    f"Date of birth must be YYYY-MM-DD, got {value!r}"
                ) from exc
        if not validate_dob(dob, today):
            raise InvalidFieldError(f"Date of birth out of range: {dob.isoformat()}")
        return dob

    if field == "gender":
        gender = normalize_gender(str(value))
        if gender is None:
            raise InvalidFieldError(f"Unknown gender: {value!r}")
        return gender

    if field == "mobile":
        digits = normalize_mobile(str(value))
        if digits is None:
            raise InvalidFieldError("Mobile number must have 8 to 15 digits")
        return digits

    return str(value).strip()


class SessionStore:
    """In-memory registry of intake sessions."""

    def __init__(
        self,
        rules: ExtractionRules | None = None,
        processing_delay: float | None = None,
    ) -> None:
        self._rules = rules
        self._processing_delay = (
            settings.PROCESSING_DELAY_SECONDS
            if processing_delay is None
            else processing_delay
        )
        self._sessions: dict[str, IntakeSession] = {}

    def create(self) -> IntakeSession:
        session = IntakeSession(
            rules=self._rules, processing_delay=self._processing_delay
        )
        self._sessions[session.session_id] = session
        logger.info("Created intake session %s", session.session_id)
        return session

    def get(self, session_id: str) -> IntakeSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"No intake session {session_id}")
        return session

    def delete(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("Deleted intake session %s", session_id)
        return removed

    @property
    def active_sessions(self) -> list[str]:
        return list(self._sessions.keys())

    @property
    def active_count(self) -> int:
        return len(self._sessions)
