"""
Prompt builders for the mentor and the three generation stages.
"""

from topical_authority.i18n import LANGUAGE_NAMES
from topical_authority.models import Language, Pillar, LessonVariation
from topical_authority.workflows.pipeline import PILLAR_COUNT, VARIATION_COUNT, QUESTION_COUNT


def language_instruction(language: Language) -> str:
    return f"Respond in {LANGUAGE_NAMES[language]}."


def create_mentor_system_prompt(context: str, language: Language) -> str:
    return f"""You are the "Topical Authority Coach", a friendly, expert mentor.

Goal: Help the user build a demand-driven content strategy from a single topic using a 3-step funnel:
1. Generate {PILLAR_COUNT} Broad Pillars.
2. Drill down into ONE pillar to get {VARIATION_COUNT} Lesson Variations.
3. Drill down into ONE variation to get {QUESTION_COUNT} Audience Questions.

Current Context: {context}

Tone: Encouraging, structured, and strategic.
Keep responses concise (under 150 words). Always guide them to the next step of the funnel.

IMPORTANT: {language_instruction(language)}"""


def create_pillars_prompt(topic: str, language: Language, count: int = PILLAR_COUNT) -> str:
    return f"""Generate {count} broad, distinct pillar topics for a comprehensive content strategy on: "{topic}".
These should cover the entire landscape of the niche (Beginner, Intermediate, Advanced, History, Future, Mistakes, Tools, etc.).

IMPORTANT: The values for 'title', 'description', and 'category' MUST be in {LANGUAGE_NAMES[language]}.

Return strictly JSON."""


def create_variations_prompt(topic: str, pillar: Pillar, language: Language, count: int = VARIATION_COUNT) -> str:
    return f"""Context: Building authority on "{topic}".
Selected Pillar: "{pillar.title}" ({pillar.description}).

Generate {count} specific "Lesson Variations" or content angles for this specific pillar.
These should be distinct ways to teach this concept (e.g., specific case study, a how-to guide, a myth-busting session, a checklist, a personal story).

IMPORTANT: The values MUST be in {LANGUAGE_NAMES[language]}.

Return strictly JSON."""


def create_questions_prompt(
    topic: str,
    pillar: Pillar,
    variation: LessonVariation,
    language: Language,
    count: int = QUESTION_COUNT,
) -> str:
    return f"""Context: Content Strategy for "{topic}".
Pillar: "{pillar.title}".
Specific Lesson/Angle: "{variation.title}" ({variation.description}).

Generate {count} highly relevant, specific audience questions that real people would ask about this specific lesson.
Focus on pain points, confusion, search intent, and practical application.

IMPORTANT: The values MUST be in {LANGUAGE_NAMES[language]}.

Return strictly JSON."""
