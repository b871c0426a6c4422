"""
Pytest configuration and shared fixtures for the coach tests.

FakeBackend stands in for the LLM provider. Responses are scripted per kind
of call ("mentor", "pillars", "variations", "questions"); a scripted value
may be a response string, an exception to raise, an async callable taking
the request, or a list of those consumed in order.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from topical_authority.backends.base import GenerationBackend, GenerationRequest
from topical_authority.gateway import GenerationGateway
from topical_authority.orchestrator import FunnelOrchestrator
from topical_authority.state import new_session


# =============================================================================
# Canned content
# =============================================================================

def pillar_items(count: int = 30, prefix: str = "p") -> List[Dict[str, str]]:
    items = [
        {
            "id": f"{prefix}{i}",
            "title": f"Pillar {prefix}{i}",
            "description": f"Description {prefix}{i}",
            "category": ["Fundamentals", "Tools", "Mistakes"][i % 3],
        }
        for i in range(1, count + 1)
    ]
    if prefix == "p" and count >= 7:
        items[6] = {
            "id": "p7",
            "title": "Common Mistakes",
            "description": "What goes wrong and why",
            "category": "Mistakes",
        }
    return items


def variation_items(count: int = 10, prefix: str = "v") -> List[Dict[str, str]]:
    items = [
        {
            "id": f"{prefix}{i}",
            "title": f"Variation {prefix}{i}",
            "description": f"Angle description {prefix}{i}",
            "angle": "Framework",
        }
        for i in range(1, count + 1)
    ]
    if prefix == "v" and count >= 3:
        items[2] = {
            "id": "v3",
            "title": "Top 5 Hydration Errors",
            "description": "The hydration mistakes that ruin crumb",
            "angle": "Mistake",
        }
    return items


def question_items(count: int = 25, prefix: str = "q") -> List[Dict[str, str]]:
    return [
        {"id": f"{prefix}{i}", "question": f"Question {prefix}{i}?", "intent": "How-to"}
        for i in range(1, count + 1)
    ]


def as_json(items: Any) -> str:
    return json.dumps(items)


# =============================================================================
# Fake backend
# =============================================================================

def request_kind(request: GenerationRequest) -> str:
    if request.response_schema is None:
        return "mentor"
    required = request.response_schema["items"]["required"]
    if "category" in required:
        return "pillars"
    if "angle" in required:
        return "variations"
    return "questions"


class FakeBackend(GenerationBackend):
    provider = "fake"

    def __init__(self):
        super().__init__(model="fake-model", api_key="test-key")
        self.requests: List[GenerationRequest] = []
        self.script: Dict[str, Any] = {
            "mentor": "Great topic! Shall we start?",
            "pillars": as_json(pillar_items()),
            "variations": as_json(variation_items()),
            "questions": as_json(question_items()),
        }

    def calls(self, kind: str) -> List[GenerationRequest]:
        return [r for r in self.requests if request_kind(r) == kind]

    async def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        kind = request_kind(request)
        scripted = self.script[kind]
        if isinstance(scripted, list):
            scripted = scripted.pop(0)
        if isinstance(scripted, BaseException):
            raise scripted
        if callable(scripted):
            return await scripted(request)
        return scripted


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def gateway(backend):
    return GenerationGateway(backend)


@pytest.fixture
def session():
    return new_session("en")


@pytest.fixture
def orchestrator(session, gateway):
    return FunnelOrchestrator(session, gateway)


async def reach_pillars(orchestrator: FunnelOrchestrator, topic: str = "sourdough baking"):
    await orchestrator.submit_reply(topic)
    await orchestrator.submit_reply("yes")


async def reach_questions(orchestrator: FunnelOrchestrator, topic: str = "sourdough baking"):
    await reach_pillars(orchestrator, topic)
    await orchestrator.select_pillar("p7")
    await orchestrator.select_variation("v3")
