"""
Funnel Orchestrator

The state machine that walks one Session through
ORIENTATION → PILLARS → VARIATIONS → QUESTIONS.

Every user action goes through here:
1. reject while a generation call is in flight (busy flag)
2. validate the action's preconditions
3. call the Generation Gateway
4. apply the result and append the mentor's narration

Generation failures never roll the stage back: the collection being
generated becomes empty and the funnel still advances.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Union

from topical_authority.errors import (
    EmptyReplyError,
    InvalidSelectionError,
    InvalidTransitionError,
    MissingTopicError,
    SessionBusyError,
)
from topical_authority.export import render_strategy
from topical_authority.gateway import GenerationGateway
from topical_authority.i18n import message
from topical_authority.intents import is_confirmation
from topical_authority.models import (
    LANGUAGES,
    Language,
    LessonVariation,
    Message,
    Pillar,
    PillarSort,
    Role,
    Stage,
    sort_pillars,
)
from topical_authority.state import Session
from topical_authority.workflows.pipeline import VARIATION_COUNT, stage_at_least

logger = logging.getLogger(__name__)


def build_context_summary(session: Session) -> str:
    """One-line funnel status handed to the mentor."""
    context = f"Current Stage: {session.stage.value}."
    if session.topic:
        context += f' Topic: "{session.topic}".'
    if session.pillars:
        context += f" Pillars: {len(session.pillars)} generated."
    if session.selected_pillar:
        context += f' Selected Pillar: "{session.selected_pillar.title}".'
    if session.variations:
        context += f" Variations: {len(session.variations)} generated."
    if session.selected_variation:
        context += f' Selected Variation: "{session.selected_variation.title}".'
    if session.questions:
        context += f" Questions: {len(session.questions)} generated."
    return context


class FunnelOrchestrator:
    """Owns all mutation of a single Session."""

    def __init__(self, session: Session, gateway: GenerationGateway):
        self.session = session
        self.gateway = gateway

    # --- Busy guard ---

    @asynccontextmanager
    async def _busy(self, action: str):
        # check-and-set with no await in between: atomic on the event loop
        if self.session.is_loading:
            logger.warning(f"Rejected '{action}' on session {self.session.id}: generation in flight")
            raise SessionBusyError(self.session.id)
        self.session.is_loading = True
        try:
            yield
        finally:
            self.session.is_loading = False

    def _ensure_idle(self, action: str):
        if self.session.is_loading:
            logger.warning(f"Rejected '{action}' on session {self.session.id}: generation in flight")
            raise SessionBusyError(self.session.id)

    def _append(self, role: Role, text: str) -> Message:
        msg = Message(role=role, text=text)
        self.session.messages.append(msg)
        return msg

    # --- User actions ---

    async def submit_reply(self, text: str) -> List[Message]:
        """
        Handle a free-text reply. Returns the messages appended by this call.

        - first reply in ORIENTATION sets the topic
        - a confirmation in ORIENTATION (topic set) generates pillars
        - anything else gets a mentor response
        """
        text = (text or "").strip()
        if not text:
            raise EmptyReplyError("Reply text is empty")

        async with self._busy("reply"):
            session = self.session
            language = session.language
            start = len(session.messages)
            stage = session.stage
            self._append("user", text)

            if stage == Stage.ORIENTATION and session.topic is None:
                session.topic = text
                logger.info(f"Session {session.id}: topic set to {text!r}")
                await self._mentor_turn(language)
            elif stage == Stage.ORIENTATION and is_confirmation(text, language):
                await self._generate_pillars(language)
            else:
                await self._mentor_turn(language)

            return session.messages[start:]

    async def confirm_topic(self) -> List[Message]:
        """Explicit confirmation action; same effect as a confirming reply."""
        async with self._busy("confirm"):
            session = self.session
            if session.topic is None:
                raise MissingTopicError("Set a topic before generating pillars")
            if session.stage != Stage.ORIENTATION:
                raise InvalidTransitionError(f"Cannot confirm topic in stage {session.stage.value}")
            start = len(session.messages)
            await self._generate_pillars(session.language)
            return session.messages[start:]

    async def regenerate_pillars(self) -> List[Message]:
        """Replace the pillar set, discarding every selection and downstream collection."""
        async with self._busy("regenerate_pillars"):
            session = self.session
            if session.topic is None:
                raise MissingTopicError("Set a topic before generating pillars")
            if session.stage == Stage.ORIENTATION:
                raise InvalidTransitionError("Confirm the topic before regenerating pillars")
            start = len(session.messages)
            self._clear_from_pillar()
            await self._generate_pillars(session.language)
            return session.messages[start:]

    async def select_pillar(self, pillar: Union[Pillar, str]) -> List[Message]:
        pillar_id = pillar.id if isinstance(pillar, Pillar) else pillar
        async with self._busy("select_pillar"):
            session = self.session
            if not stage_at_least(session.stage, Stage.PILLARS):
                raise InvalidTransitionError("No pillars have been generated yet")
            chosen = session.find_pillar(pillar_id)
            if chosen is None:
                raise InvalidSelectionError("pillar", pillar_id)

            language = session.language
            start = len(session.messages)
            self._clear_from_pillar()
            session.selected_pillar = chosen
            logger.info(f"Session {session.id}: pillar {chosen.id} selected")

            self._append("user", message(language, "select_pillar", title=chosen.title))
            self._append("mentor", message(language, "pillar_pending", count=VARIATION_COUNT))

            result = await self.gateway.generate_variations(language, session.topic, chosen)
            session.variations = result.items
            key = "variations_ready" if result.items else "variations_empty"
            self._append("mentor", message(language, key, count=len(result.items), title=chosen.title))
            return session.messages[start:]

    async def select_variation(self, variation: Union[LessonVariation, str]) -> List[Message]:
        variation_id = variation.id if isinstance(variation, LessonVariation) else variation
        async with self._busy("select_variation"):
            session = self.session
            if session.selected_pillar is None:
                raise InvalidTransitionError("Select a pillar before selecting a variation")
            chosen = session.find_variation(variation_id)
            if chosen is None:
                raise InvalidSelectionError("variation", variation_id)

            language = session.language
            start = len(session.messages)
            session.selected_variation = chosen
            session.questions = []
            logger.info(f"Session {session.id}: variation {chosen.id} selected")

            self._append("user", message(language, "select_variation", title=chosen.title))
            self._append("mentor", message(language, "variation_pending"))

            result = await self.gateway.generate_questions(
                language, session.topic, session.selected_pillar, chosen
            )
            session.questions = result.items
            key = "questions_ready" if result.items else "questions_empty"
            self._append("mentor", message(language, key, count=len(result.items), title=chosen.title))
            return session.messages[start:]

    def export_strategy(self) -> str:
        self._ensure_idle("export")
        return render_strategy(self.session)

    def set_language(self, language: Language):
        if language not in LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self.session.language = language

    def sorted_pillars(self, by: PillarSort = "category") -> List[Pillar]:
        return sort_pillars(self.session.pillars or [], by)

    # --- Internals ---

    def _clear_from_pillar(self):
        session = self.session
        session.selected_pillar = None
        session.selected_variation = None
        session.variations = []
        session.questions = []

    async def _generate_pillars(self, language: Language):
        session = self.session
        result = await self.gateway.generate_pillars(language, session.topic)
        session.pillars = result.items
        key = "pillars_ready" if result.items else "pillars_empty"
        self._append("mentor", message(language, key, count=len(result.items), topic=session.topic))

    async def _mentor_turn(self, language: Language) -> Message:
        session = self.session
        reply = await self.gateway.mentor_reply(
            history=list(session.messages),
            context=build_context_summary(session),
            language=language,
            topic=session.topic,
        )
        return self._append("mentor", reply)
