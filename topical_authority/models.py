"""
Domain models for the topical authority funnel.

Generated items (pillars, variations, questions) are all-string records so the
same model doubles as the structured-output schema sent to the backend.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, List, get_args
import uuid

from pydantic import BaseModel, ConfigDict, Field


Language = Literal["en", "ko"]
Role = Literal["user", "mentor"]

LANGUAGES = ("en", "ko")


class Stage(str, Enum):
    ORIENTATION = "ORIENTATION"
    PILLARS = "PILLARS"
    VARIATIONS = "VARIATIONS"
    QUESTIONS = "QUESTIONS"


# --- Generated items ---

class GeneratedItem(BaseModel):
    """Base for backend-generated records: immutable, unknown keys dropped."""
    model_config = ConfigDict(frozen=True, extra="ignore")


class Pillar(GeneratedItem):
    id: str
    title: str
    description: str
    category: str = Field(description="Category (e.g. Fundamentals, Strategy, Mistakes, Tools)")


class LessonVariation(GeneratedItem):
    id: str
    title: str = Field(description="Catchy title for this lesson/content piece")
    description: str
    angle: str = Field(description="The content angle (e.g. 'Mistake', 'Story', 'Framework')")


class AudienceQuestion(GeneratedItem):
    id: str
    question: str
    intent: str = Field(description="User intent (e.g. 'How-to', 'Definition', 'Comparison', 'Troubleshooting')")


PillarSort = Literal["category", "title"]
PILLAR_SORTS = get_args(PillarSort)


def sort_pillars(pillars: List[Pillar], by: PillarSort = "category") -> List[Pillar]:
    """Sort by title, or by category then title. Returns a new list."""
    if by not in PILLAR_SORTS:
        raise ValueError(f"Unknown sort: {by}; expected one of {', '.join(PILLAR_SORTS)}")
    if by == "title":
        return sorted(pillars, key=lambda p: p.title.casefold())
    return sorted(pillars, key=lambda p: (p.category.casefold(), p.title.casefold()))


# --- Conversation ---

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Role
    text: str
    timestamp: datetime = Field(default_factory=_utcnow)
