# cbt session state machine: guided situation → emotion → thought → challenge/reframe flow
#
# SessionState is immutable; every transition is a pure function returning a new state.
# CBTSession drives those transitions and performs the two pieces of external work
# (classification before CHALLENGE_REFRAME, persistence on submit).
#
# generation is bumped on cancel and on successful submit, results that settle
# against an older generation are discarded.

import asyncio
import dataclasses
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from mindtrack.config import settings
from mindtrack.errors import (
    AppError,
    InvalidTransitionError,
    NotFoundError,
    SessionBusyError,
    ValidationError,
)
from mindtrack.models.cbt import ThoughtDiagnosis
from mindtrack.services.classifier import ClassificationOutcome, ThoughtClassifier
from mindtrack.services.journal_service import JournalService

logger = logging.getLogger(__name__)


class Step(str, Enum):
    SITUATION = "SITUATION"
    EMOTION = "EMOTION"
    THOUGHT = "THOUGHT"
    CHALLENGE_REFRAME = "CHALLENGE_REFRAME"


STEP_ORDER = [Step.SITUATION, Step.EMOTION, Step.THOUGHT, Step.CHALLENGE_REFRAME]


class Phase(str, Enum):
    EDITING = "EDITING"
    ANALYZING = "ANALYZING"
    SUBMITTING = "SUBMITTING"
    CANCELLED = "CANCELLED"


# fields each step must validate before moving forward
STEP_FIELDS = {
    Step.SITUATION: ("situation",),
    Step.EMOTION: ("emotion",),
    Step.THOUGHT: ("thought",),
    Step.CHALLENGE_REFRAME: (),
}

REQUIRED_FIELDS = ("situation", "emotion", "thought")
SUGGESTION_FIELDS = ("challenge", "reframe")

MIN_LENGTHS = {
    "situation": settings.SITUATION_MIN_LENGTH,
    "emotion": settings.EMOTION_MIN_LENGTH,
    "thought": settings.THOUGHT_MIN_LENGTH,
}

FIELD_MESSAGES = {
    "situation": f"Please describe the situation in at least {settings.SITUATION_MIN_LENGTH} characters",
    "emotion": "Please enter at least one emotion",
    "thought": f"Please describe your thoughts in at least {settings.THOUGHT_MIN_LENGTH} characters",
}

ANALYSIS_FAILED_WARNING = "Could not analyze your thoughts. You can still proceed manually."


@dataclass(frozen=True)
class SessionFields:
    situation: str = ""
    emotion: str = ""
    thought: str = ""
    challenge: str = ""
    reframe: str = ""


@dataclass(frozen=True)
class SessionState:
    step: Step = Step.SITUATION
    phase: Phase = Phase.EDITING
    fields: SessionFields = field(default_factory=SessionFields)
    diagnosis: Optional[ThoughtDiagnosis] = None
    analysis_attempted: bool = False
    errors: dict = field(default_factory=dict)
    warning: Optional[str] = None
    generation: int = 0

    @property
    def busy(self) -> bool:
        return self.phase in (Phase.ANALYZING, Phase.SUBMITTING)

    @property
    def cancelled(self) -> bool:
        return self.phase is Phase.CANCELLED


# pure transitions

def new_session(generation: int = 0) -> SessionState:
    return SessionState(generation=generation)


def validate_fields(fields: SessionFields, names) -> dict:
    """field name -> message for every named field that fails its minimum length"""
    errors = {}
    for name in names:
        value = getattr(fields, name).strip()
        if len(value) < MIN_LENGTHS[name]:
            errors[name] = FIELD_MESSAGES[name]
    return errors


def _require_editing(state: SessionState) -> None:
    if state.cancelled:
        raise InvalidTransitionError("Session was cancelled")
    if state.busy:
        raise SessionBusyError()


def set_fields(state: SessionState, **values: str) -> SessionState:
    """overwrite any subset of the session fields.
    challenge and reframe are only editable on the CHALLENGE_REFRAME step."""
    _require_editing(state)

    unknown = [name for name in values if name not in REQUIRED_FIELDS + SUGGESTION_FIELDS]
    if unknown:
        raise ValidationError([{"field": name, "message": "Unknown field"} for name in unknown])

    not_text = [name for name, value in values.items() if not isinstance(value, str)]
    if not_text:
        raise ValidationError([{"field": name, "message": "Input should be a valid string"} for name in not_text])

    if state.step is not Step.CHALLENGE_REFRAME and any(name in SUGGESTION_FIELDS for name in values):
        raise InvalidTransitionError("Challenge and reframe can only be edited on the last step")

    errors = {k: v for k, v in state.errors.items() if k not in values}
    return dataclasses.replace(
        state,
        fields=dataclasses.replace(state.fields, **values),
        errors=errors,
    )


def advance(state: SessionState) -> SessionState:
    """move forward one step if the current step's fields are valid.
    leaving THOUGHT for the first time enters the ANALYZING phase instead."""
    _require_editing(state)

    if state.step is Step.CHALLENGE_REFRAME:
        raise InvalidTransitionError("Already on the last step, submit the entry instead")

    errors = validate_fields(state.fields, STEP_FIELDS[state.step])
    if errors:
        return dataclasses.replace(state, errors=errors)

    if state.step is Step.THOUGHT:
        if not state.analysis_attempted:
            return dataclasses.replace(state, phase=Phase.ANALYZING, errors={}, warning=None)
        # diagnosis is fetched at most once per session
        return dataclasses.replace(state, step=Step.CHALLENGE_REFRAME, errors={})

    next_step = STEP_ORDER[STEP_ORDER.index(state.step) + 1]
    return dataclasses.replace(state, step=next_step, errors={})


def apply_classification(state: SessionState, outcome: ClassificationOutcome) -> SessionState:
    """settle the ANALYZING phase and present CHALLENGE_REFRAME"""
    if state.phase is not Phase.ANALYZING:
        raise InvalidTransitionError("No analysis in progress")

    if outcome.ok:
        fields = dataclasses.replace(
            state.fields,
            challenge=outcome.diagnosis.challenge,
            reframe=outcome.diagnosis.reframe,
        )
        diagnosis, warning = outcome.diagnosis, None
    else:
        fields = dataclasses.replace(state.fields, challenge="", reframe="")
        diagnosis, warning = None, ANALYSIS_FAILED_WARNING

    return dataclasses.replace(
        state,
        step=Step.CHALLENGE_REFRAME,
        phase=Phase.EDITING,
        fields=fields,
        diagnosis=diagnosis,
        analysis_attempted=True,
        warning=warning,
    )


def go_back(state: SessionState) -> SessionState:
    _require_editing(state)
    if state.step is Step.SITUATION:
        return dataclasses.replace(state, errors={})
    previous = STEP_ORDER[STEP_ORDER.index(state.step) - 1]
    return dataclasses.replace(state, step=previous, errors={})


def begin_submit(state: SessionState) -> SessionState:
    """enter SUBMITTING, or return the state with errors if a required field is invalid"""
    _require_editing(state)

    if state.step is not Step.CHALLENGE_REFRAME:
        raise InvalidTransitionError("The entry can only be submitted from the last step")

    errors = validate_fields(state.fields, REQUIRED_FIELDS)
    if errors:
        return dataclasses.replace(state, errors=errors)
    return dataclasses.replace(state, phase=Phase.SUBMITTING, errors={})


def apply_submission(state: SessionState, error: Optional[str] = None) -> SessionState:
    """success resets the session, failure keeps every field for a retry"""
    if state.phase is not Phase.SUBMITTING:
        raise InvalidTransitionError("No submission in progress")
    if error is None:
        return new_session(generation=state.generation + 1)
    return dataclasses.replace(state, phase=Phase.EDITING, errors={"submit": error})


def cancel(state: SessionState) -> SessionState:
    """discard everything, allowed from any state"""
    if state.cancelled:
        return state
    return SessionState(phase=Phase.CANCELLED, generation=state.generation + 1)


# async driver

class CBTSession:
    """one run of the guided journaling flow for a user"""

    def __init__(
        self,
        user_id: int,
        classifier: ThoughtClassifier,
        journals: JournalService,
        session_id: Optional[str] = None,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.user_id = user_id
        self.classifier = classifier
        self.journals = journals
        self.state = new_session()

    def update_fields(self, **values: str) -> SessionState:
        self.state = set_fields(self.state, **values)
        return self.state

    async def advance(self) -> SessionState:
        self.state = advance(self.state)
        if self.state.phase is not Phase.ANALYZING:
            return self.state

        generation = self.state.generation
        fields = self.state.fields
        try:
            outcome = await self.classifier.try_classify(fields.situation, fields.emotion, fields.thought)
        except asyncio.CancelledError:
            if self.state.generation == generation:
                self.state = apply_classification(
                    self.state, ClassificationOutcome.failure("Analysis was interrupted")
                )
            raise

        if self.state.generation != generation:
            logger.info(f"Session {self.session_id}: discarding classification that settled after cancel")
            return self.state

        if not outcome.ok:
            logger.warning(f"Session {self.session_id}: analysis failed, continuing without suggestions")
        self.state = apply_classification(self.state, outcome)
        return self.state

    def back(self) -> SessionState:
        self.state = go_back(self.state)
        return self.state

    async def submit(self) -> dict:
        """persist the accumulated entry, returns the stored record"""
        state = begin_submit(self.state)
        self.state = state
        if state.phase is not Phase.SUBMITTING:
            raise ValidationError([
                {"field": name, "message": message} for name, message in state.errors.items()
            ])

        generation = state.generation
        fields = state.fields
        payload = {
            "user_id": self.user_id,
            "situation": fields.situation,
            "emotion": fields.emotion,
            "thought": fields.thought,
            "challenge": fields.challenge or None,
            "reframe": fields.reframe or None,
        }

        try:
            entry = await self.journals.create(payload)
        except BaseException as e:
            if self.state.generation == generation:
                message = e.message if isinstance(e, AppError) else "Failed to create journal entry"
                self.state = apply_submission(self.state, error=message)
            raise

        if self.state.generation != generation:
            logger.info(f"Session {self.session_id}: entry {entry['id']} saved after cancel, session left cancelled")
            return entry

        self.state = apply_submission(self.state)
        logger.info(f"Session {self.session_id}: submitted journal entry {entry['id']}")
        return entry

    def cancel(self) -> SessionState:
        self.state = cancel(self.state)
        return self.state


class SessionRegistry:
    """live guided sessions keyed by session id.
    sessions untouched for longer than idle_ttl seconds are cancelled and dropped."""

    def __init__(self, idle_ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.idle_ttl = settings.SESSION_IDLE_TTL_SECONDS if idle_ttl is None else idle_ttl
        self._clock = clock
        self._sessions: dict[str, CBTSession] = {}
        self._last_seen: dict[str, float] = {}

    def __len__(self):
        return len(self._sessions)

    def prune(self) -> int:
        """drop idle sessions, busy ones are kept until their work settles"""
        now = self._clock()
        expired = [
            sid for sid, session in self._sessions.items()
            if not session.state.busy and now - self._last_seen[sid] > self.idle_ttl
        ]
        for sid in expired:
            self._forget(sid).cancel()
        if expired:
            logger.info(f"Expired {len(expired)} idle CBT session(s)")
        return len(expired)

    def create(self, user_id: int, classifier: ThoughtClassifier, journals: JournalService) -> CBTSession:
        self.prune()
        session = CBTSession(user_id, classifier, journals)
        self._sessions[session.session_id] = session
        self._last_seen[session.session_id] = self._clock()
        logger.info(f"CBT session started: {session.session_id} for user {user_id}")
        return session

    def get(self, session_id: str) -> CBTSession:
        self.prune()
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError("Session not found")
        self._last_seen[session_id] = self._clock()
        return session

    def discard(self, session_id: str) -> CBTSession:
        """cancel and forget a session"""
        session = self._forget(session_id)
        if session is None:
            raise NotFoundError("Session not found")
        session.cancel()
        logger.info(f"CBT session cancelled: {session_id}")
        return session

    def clear(self) -> None:
        for session in self._sessions.values():
            session.cancel()
        self._sessions.clear()
        self._last_seen.clear()

    def _forget(self, session_id: str) -> Optional[CBTSession]:
        self._last_seen.pop(session_id, None)
        return self._sessions.pop(session_id, None)


# singleton instance
registry = SessionRegistry()


async def get_session_registry() -> SessionRegistry:
    """dependency injection for session registry access"""
    return registry
