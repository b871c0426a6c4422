"""
Markdown export of a session's strategy.

Pure serialization: the same Session state always yields the same bytes.
"""

import re

from topical_authority.i18n import EXPORT_HEADINGS
from topical_authority.state import Session

SELECTED_PREFIX = "✅ **SELECTED**:"
_WHITESPACE_RE = re.compile(r"\s+")


def render_strategy(session: Session) -> str:
    headings = EXPORT_HEADINGS[session.language]
    topic = session.topic or ""
    pillar = session.selected_pillar
    selected_variation = session.selected_variation

    md = f"# {headings['title']}: {topic}\n\n"

    if pillar:
        md += f"## {headings['selected_pillar']}: {pillar.title}\n"
        md += f"> {pillar.description}\n"
        md += f"**{headings['category']}:** {pillar.category}\n\n"

    if session.variations:
        md += f"### {headings['variations']}\n"
        for variation in session.variations:
            is_selected = selected_variation is not None and selected_variation.id == variation.id
            prefix = SELECTED_PREFIX if is_selected else "-"
            md += f"{prefix} **{variation.title}**\n  *{variation.angle}* - {variation.description}\n\n"

    if selected_variation and session.questions:
        md += f"### {headings['questions']} for: {selected_variation.title}\n"
        for i, question in enumerate(session.questions, start=1):
            md += f"{i}. {question.question}\n   *{headings['intent']}: {question.intent}*\n"

    return md


def export_filename(session: Session) -> str:
    stem = _WHITESPACE_RE.sub("_", session.topic or "")
    return f"{stem}_Strategy.md"
