"""
Confirmation intent policy.

A reply counts as a confirmation when one of its words matches the fixed
token set for the session language and none of its words is a negation.
English tokens are accepted in every language. English matching is
whole-word and case-insensitive. Korean words of two or more syllables match
on prefix, since endings attach to the stem ("시작해주세요" starts with "시작").
"""

import re
from typing import Dict, FrozenSet

from topical_authority.models import Language


CONFIRMATION_TOKENS: Dict[str, FrozenSet[str]] = {
    "en": frozenset({"yes", "y", "yeah", "yep", "sure", "ok", "okay", "start", "generate", "go", "proceed"}),
    "ko": frozenset({"네", "예", "응", "좋아요", "좋아", "시작", "생성", "진행"}),
}

NEGATION_TOKENS: Dict[str, FrozenSet[str]] = {
    "en": frozenset({"no", "nope", "not", "don't", "dont", "never", "wait", "stop", "cancel"}),
    "ko": frozenset({"아니", "아뇨", "안", "싫어", "잠깐", "말고", "취소"}),
}

_WORD_RE = re.compile(r"[\w']+", re.UNICODE)


def _words(text: str):
    return _WORD_RE.findall(text.casefold().replace("’", "'"))


def _matches(word: str, token: str) -> bool:
    # single-syllable tokens ("네", "예") must match exactly
    return word == token or (len(token) > 1 and word.startswith(token))


def _has_token(words, tokens: Dict[str, FrozenSet[str]], language: Language) -> bool:
    english = tokens["en"]
    native = tokens.get(language, frozenset())
    for word in words:
        if word in english:
            return True
        if language != "en" and any(_matches(word, token) for token in native):
            return True
    return False


def is_confirmation(text: str, language: Language) -> bool:
    """Return True when the reply confirms the topic in the given language."""
    words = _words(text)
    if _has_token(words, NEGATION_TOKENS, language):
        return False
    return _has_token(words, CONFIRMATION_TOKENS, language)
