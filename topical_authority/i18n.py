"""
Localized mentor narration, UI labels and export headings.

Keyed by language, then by message key. Templates use str.format fields.
"""

from typing import Dict

from topical_authority.models import Language


MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "greeting": (
            "Welcome to the Iterative Topical Authority Coach. \n\n"
            "I am here to help you build a complete, demand-driven content strategy from a single core topic.\n\n"
            "To begin, please enter the MAIN TOPIC you want to build authority around."
        ),
        "apology_empty": "I apologize, I'm having trouble connecting. Please try again.",
        "apology_error": "I encountered an error. Please check your API key.",
        "pillars_ready": (
            "I've generated {count} foundational pillars for \"{topic}\". "
            "Please go to the 'Pillars' tab and select ONE to proceed to the next step."
        ),
        "pillars_empty": (
            "I couldn't generate pillars for \"{topic}\" this time. "
            "You can ask me to regenerate them."
        ),
        "select_pillar": "I select the pillar: \"{title}\".",
        "pillar_pending": "Excellent choice. I am now generating {count} specific lesson variations for that pillar...",
        "variations_ready": (
            "I've crafted {count} specific lesson variations for \"{title}\". "
            "Please view them in the 'Variations' tab and select ONE to uncover audience questions."
        ),
        "variations_empty": "I couldn't generate lesson variations for \"{title}\". Try selecting the pillar again.",
        "select_variation": "I select the variation: \"{title}\".",
        "variation_pending": (
            "Perfect. Now digging into the search intent to find the burning questions for this specific lesson..."
        ),
        "questions_ready": (
            "I've identified {count} high-intent audience questions. Check the 'Questions' tab. "
            "This is your demand-driven content roadmap."
        ),
        "questions_empty": "I couldn't uncover audience questions for \"{title}\". Try selecting the variation again.",
    },
    "ko": {
        "greeting": (
            "반복형 토픽 권위 코치에 오신 것을 환영합니다. \n\n"
            "하나의 핵심 주제로부터 수요 기반의 완전한 콘텐츠 전략을 세울 수 있도록 도와드리겠습니다.\n\n"
            "시작하려면 권위를 쌓고 싶은 핵심 주제를 입력해 주세요."
        ),
        "apology_empty": "죄송합니다. 연결에 문제가 발생했습니다.",
        "apology_error": "오류가 발생했습니다.",
        "pillars_ready": "\"{topic}\"에 대한 {count}개의 핵심 기둥을 생성했습니다. '기둥' 탭으로 이동하여 하나를 선택하세요.",
        "pillars_empty": "\"{topic}\"에 대한 기둥을 생성하지 못했습니다. 다시 생성을 요청할 수 있습니다.",
        "select_pillar": "기둥을 선택합니다: \"{title}\".",
        "pillar_pending": "좋습니다. 해당 기둥에 대한 {count}가지 구체적인 레슨 변형을 생성하고 있습니다...",
        "variations_ready": "{count}가지 레슨 변형이 준비되었습니다. '변형' 탭에서 하나를 선택하여 청중 질문을 생성하세요.",
        "variations_empty": "\"{title}\"에 대한 레슨 변형을 생성하지 못했습니다. 기둥을 다시 선택해 보세요.",
        "select_variation": "변형을 선택합니다: \"{title}\".",
        "variation_pending": "완벽합니다. 이제 실제 청중이 검색할 만한 질문들을 도출해 보겠습니다...",
        "questions_ready": "{count}개의 핵심 청중 질문이 생성되었습니다. '질문' 탭에서 확인하세요. 이것이 당신의 콘텐츠 로드맵입니다.",
        "questions_empty": "\"{title}\"에 대한 청중 질문을 찾지 못했습니다. 변형을 다시 선택해 보세요.",
    },
}


LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "home": "Home",
        "pillars": "30 Pillars",
        "variations": "10 Variations",
        "questions": "25 Questions",
        "pillars_title": "30 Broad Pillars",
        "variations_title": "10 Lesson Variations",
        "questions_title": "25 Audience Questions",
        "pillar_prompt": "Select to generate Lesson Variations",
        "variation_prompt": "Select to generate Audience Questions",
        "sort_by": "Sort by:",
        "sort_title": "Title",
        "sort_category": "Category",
        "context_pillar": "Selected Pillar:",
        "context_variation": "Selected Lesson:",
        "download": "Download Strategy",
    },
    "ko": {
        "home": "홈 (채팅)",
        "pillars": "30개 기둥",
        "variations": "10개 변형",
        "questions": "25개 질문",
        "pillars_title": "30개의 광범위한 기둥",
        "variations_title": "10개의 구체적 레슨",
        "questions_title": "25개의 청중 질문",
        "pillar_prompt": "이 기둥을 선택하여 레슨 생성하기",
        "variation_prompt": "이 레슨을 선택하여 질문 생성하기",
        "sort_by": "정렬:",
        "sort_title": "제목",
        "sort_category": "카테고리",
        "context_pillar": "선택된 기둥:",
        "context_variation": "선택된 레슨:",
        "download": "전략 다운로드",
    },
}


EXPORT_HEADINGS: Dict[str, Dict[str, str]] = {
    "en": {
        "title": "Topical Authority Strategy",
        "selected_pillar": "Selected Pillar",
        "category": "Category",
        "variations": "Lesson Variations",
        "questions": "Audience Questions",
        "intent": "Intent",
    },
    "ko": {
        "title": "토픽 권위 전략",
        "selected_pillar": "선택된 기둥 (Subtopic)",
        "category": "카테고리",
        "variations": "레슨 변형 (Variations)",
        "questions": "청중 질문 (Related Questions)",
        "intent": "의도",
    },
}


LANGUAGE_NAMES = {"en": "English", "ko": "Korean"}


def message(language: Language, key: str, **fields) -> str:
    return MESSAGES[language][key].format(**fields)


def labels(language: Language) -> Dict[str, str]:
    return dict(LABELS[language])
