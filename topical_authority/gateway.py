"""
Generation Gateway

Narrow interface between the funnel and the generation backend:
- builds the request (prompt, structured-output schema, language)
- makes exactly one backend call
- validates the response shape against the item model
- degrades instead of raising: an empty GenerationResult for the three
  generation calls, a localized apology for the mentor call
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from topical_authority import prompts
from topical_authority.backends.base import GenerationBackend, GenerationRequest, HistoryTurn
from topical_authority.errors import BackendResponseError
from topical_authority.i18n import message
from topical_authority.models import (
    AudienceQuestion,
    GeneratedItem,
    Language,
    LessonVariation,
    Message,
    Pillar,
)
from topical_authority.workflows.pipeline import PILLAR_COUNT, VARIATION_COUNT, QUESTION_COUNT

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=GeneratedItem)


@dataclass
class GenerationResult(Generic[T]):
    """Result-or-failure of one generation call. Failed results carry no items."""
    items: List[T] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> "GenerationResult[T]":
        return cls(items=[], error=error)


# --- Schema & parsing ---

def item_schema(model: Type[GeneratedItem]) -> Dict[str, Any]:
    """Array-of-objects schema with every field a required string."""
    properties: Dict[str, Any] = {}
    for name, info in model.model_fields.items():
        prop: Dict[str, Any] = {"type": "string"}
        if info.description:
            prop["description"] = info.description
        properties[name] = prop
    return {
        "type": "array",
        "items": {
            "type": "object",
            "properties": properties,
            "required": list(model.model_fields),
        },
    }


def _looks_like_items(payload: Any) -> bool:
    if isinstance(payload, list):
        return bool(payload) and all(isinstance(item, dict) for item in payload)
    if isinstance(payload, dict):
        try:
            return _looks_like_items(unwrap_items(payload))
        except BackendResponseError:
            return False
    return False


def extract_json(text: str) -> Any:
    """
    Parse JSON, falling back to JSON embedded in prose.

    Every "[" or "{" offset is tried in order; the first value holding a list
    of objects wins, otherwise the first value that parses at all.
    """
    text = text.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    decoder = json.JSONDecoder()
    first = None
    for idx, char in enumerate(text):
        if char not in "[{":
            continue
        try:
            payload, _ = decoder.raw_decode(text, idx)
        except json.JSONDecodeError:
            continue
        if _looks_like_items(payload):
            return payload
        if first is None:
            first = payload
    if first is not None:
        return first
    raise BackendResponseError("Response is not valid JSON")


def unwrap_items(payload: Any) -> list:
    """Handle both array and object responses."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if isinstance(payload.get("items"), list):
            return payload["items"]
        lists = [value for value in payload.values() if isinstance(value, list)]
        if len(lists) == 1:
            return lists[0]
    raise BackendResponseError(f"Expected a JSON array, got {type(payload).__name__}")


def parse_items(text: Optional[str], model: Type[T]) -> List[T]:
    if not text or not text.strip():
        raise BackendResponseError("Empty response")
    payload = unwrap_items(extract_json(text))
    try:
        return TypeAdapter(List[model]).validate_python(payload)
    except ValidationError as e:
        raise BackendResponseError(f"{e.error_count()} invalid field(s) in {model.__name__} items") from e


# --- Gateway ---

HistoryEntry = Union[Message, Dict[str, str]]


def to_history_turns(history: Sequence[HistoryEntry]) -> List[HistoryTurn]:
    turns = []
    for entry in history:
        if isinstance(entry, Message):
            role, text = entry.role, entry.text
        else:
            role, text = entry["role"], entry["text"]
        turns.append(HistoryTurn(role="model" if role in ("mentor", "model") else "user", text=text))
    return turns


class GenerationGateway:
    """The only path from the funnel to a generation backend."""

    def __init__(self, backend: GenerationBackend, mentor_temperature: float = 0.7):
        self.backend = backend
        self.mentor_temperature = mentor_temperature

    async def mentor_reply(
        self,
        history: Sequence[HistoryEntry],
        context: str,
        language: Language,
        topic: Optional[str],
    ) -> str:
        request = GenerationRequest(
            history=to_history_turns(history),
            system_instruction=prompts.create_mentor_system_prompt(context, language),
            temperature=self.mentor_temperature,
        )
        try:
            text = await self.backend.generate(request)
        except Exception as e:
            logger.error(f"Mentor reply failed (provider={self.backend.provider}, topic={topic!r}): {e}")
            return message(language, "apology_error")

        if not text or not text.strip():
            logger.warning(f"Mentor reply was empty (provider={self.backend.provider})")
            return message(language, "apology_empty")
        return text.strip()

    async def generate_pillars(self, language: Language, topic: str) -> GenerationResult[Pillar]:
        prompt = prompts.create_pillars_prompt(topic, language, PILLAR_COUNT)
        return await self._generate_items("pillars", Pillar, prompt)

    async def generate_variations(
        self, language: Language, topic: str, pillar: Pillar
    ) -> GenerationResult[LessonVariation]:
        prompt = prompts.create_variations_prompt(topic, pillar, language, VARIATION_COUNT)
        return await self._generate_items("variations", LessonVariation, prompt)

    async def generate_questions(
        self, language: Language, topic: str, pillar: Pillar, variation: LessonVariation
    ) -> GenerationResult[AudienceQuestion]:
        prompt = prompts.create_questions_prompt(topic, pillar, variation, language, QUESTION_COUNT)
        return await self._generate_items("questions", AudienceQuestion, prompt)

    async def _generate_items(self, kind: str, model: Type[T], prompt: str) -> GenerationResult[T]:
        request = GenerationRequest(prompt=prompt, response_schema=item_schema(model))
        try:
            text = await self.backend.generate(request)
            items = parse_items(text, model)
        except Exception as e:
            logger.error(f"Generating {kind} failed (provider={self.backend.provider}): {e}")
            return GenerationResult.failure(str(e))

        logger.info(f"Generated {len(items)} {kind} (provider={self.backend.provider})")
        return GenerationResult(items=items)
