"""
Session State for the Topical Authority Funnel

Holds the aggregate root for one coaching session and an in-memory store.
Sessions are never persisted; they live for the life of the process.

FunnelOrchestrator drives every funnel transition; the language is the
only field set from outside it. Stage is never stored: it is
derived from which selections and collections are populated.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
import uuid

from pydantic import BaseModel, Field

from topical_authority.errors import SessionNotFoundError
from topical_authority.i18n import message
from topical_authority.models import (
    AudienceQuestion,
    Language,
    LessonVariation,
    Message,
    Pillar,
    Stage,
)


class Session(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    topic: Optional[str] = None
    language: Language = "en"

    # None until the pillar generation call resolves; then authoritative (possibly empty)
    pillars: Optional[List[Pillar]] = None
    variations: List[LessonVariation] = Field(default_factory=list)
    questions: List[AudienceQuestion] = Field(default_factory=list)

    selected_pillar: Optional[Pillar] = None
    selected_variation: Optional[LessonVariation] = None

    messages: List[Message] = Field(default_factory=list)
    is_loading: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def stage(self) -> Stage:
        return derive_stage(self)

    def find_pillar(self, pillar_id: str) -> Optional[Pillar]:
        for pillar in self.pillars or []:
            if pillar.id == pillar_id:
                return pillar
        return None

    def find_variation(self, variation_id: str) -> Optional[LessonVariation]:
        for variation in self.variations:
            if variation.id == variation_id:
                return variation
        return None

    def snapshot(self) -> dict:
        """JSON-ready view of the session including the derived stage."""
        data = self.model_dump(mode="json")
        data["stage"] = self.stage.value
        return data


def derive_stage(session: Session) -> Stage:
    if session.selected_variation is not None:
        return Stage.QUESTIONS
    if session.selected_pillar is not None:
        return Stage.VARIATIONS
    if session.pillars is not None:
        return Stage.PILLARS
    return Stage.ORIENTATION


def new_session(language: Language = "en") -> Session:
    """Fresh session in ORIENTATION with the seeded mentor greeting."""
    return Session(
        language=language,
        messages=[Message(role="mentor", text=message(language, "greeting"))],
    )


class SessionStore:
    """In-memory session registry keyed by session id."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def create(self, language: Language = "en") -> Session:
        session = new_session(language)
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return session

    def delete(self, session_id: str):
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
