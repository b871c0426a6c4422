"""Gateway: request shaping, structured-output validation, degradation."""

import json

import pytest

from conftest import FakeBackend, as_json, pillar_items, question_items, variation_items
from topical_authority.backends.google import GeminiBackend
from topical_authority.gateway import (
    GenerationGateway,
    extract_json,
    item_schema,
    parse_items,
    unwrap_items,
)
from topical_authority.errors import BackendResponseError
from topical_authority.models import LessonVariation, Message, Pillar


# =============================================================================
# Parsing
# =============================================================================

def test_item_schema_requires_every_field_as_string():
    schema = item_schema(Pillar)

    assert schema["type"] == "array"
    assert schema["items"]["required"] == ["id", "title", "description", "category"]
    assert all(prop["type"] == "string" for prop in schema["items"]["properties"].values())
    assert "description" in schema["items"]["properties"]["category"]


def test_extract_json_finds_array_inside_prose():
    text = 'Here you go:\n[{"id": "1"}]\nHope this helps!'
    assert extract_json(text) == [{"id": "1"}]


def test_extract_json_skips_earlier_brackets_in_prose():
    text = 'Here [note]: [{"id": "1"}, {"id": "2"}] and {"also": "this"}'
    assert extract_json(text) == [{"id": "1"}, {"id": "2"}]


def test_parse_items_reads_array_after_bracketed_prose():
    pillars = [
        {"id": "1", "title": "A", "description": "d", "category": "c"},
        {"id": "2", "title": "B", "description": "d", "category": "c"},
    ]
    text = f"Sure [draft 2]: {json.dumps(pillars)}\nLet me know {{if}} you need more."

    items = parse_items(text, Pillar)

    assert [p.id for p in items] == ["1", "2"]


def test_extract_json_finds_wrapped_object_inside_prose():
    text = 'Result (see [1]): {"items": [{"id": "1"}]}'
    assert extract_json(text) == {"items": [{"id": "1"}]}


def test_extract_json_rejects_garbage():
    with pytest.raises(BackendResponseError):
        extract_json("no json here")


def test_unwrap_items_accepts_wrapped_object():
    assert unwrap_items({"items": [1, 2]}) == [1, 2]
    assert unwrap_items({"pillars": [1]}) == [1]


def test_unwrap_items_rejects_object_without_single_list():
    with pytest.raises(BackendResponseError):
        unwrap_items({"a": [1], "b": [2]})
    with pytest.raises(BackendResponseError):
        unwrap_items("text")


def test_parse_items_rejects_missing_field():
    payload = [{"id": "v1", "title": "t", "description": "d"}]
    with pytest.raises(BackendResponseError):
        parse_items(json.dumps(payload), LessonVariation)


def test_parse_items_rejects_non_string_field():
    payload = [{"id": 1, "title": "t", "description": "d", "category": "c"}]
    with pytest.raises(BackendResponseError):
        parse_items(json.dumps(payload), Pillar)


def test_parse_items_ignores_extra_keys():
    payload = [{"id": "p1", "title": "t", "description": "d", "category": "c", "score": 9}]
    items = parse_items(json.dumps(payload), Pillar)
    assert items == [Pillar(id="p1", title="t", description="d", category="c")]


# =============================================================================
# Generation calls
# =============================================================================

async def test_generate_pillars_returns_validated_items(gateway, backend):
    result = await gateway.generate_pillars("en", "sourdough baking")

    assert result.ok
    assert len(result.items) == 30
    assert all(isinstance(p, Pillar) for p in result.items)

    request = backend.calls("pillars")[0]
    assert "30 broad, distinct pillar topics" in request.prompt
    assert '"sourdough baking"' in request.prompt
    assert "English" in request.prompt


async def test_returned_collection_is_authoritative(gateway, backend):
    backend.script["pillars"] = as_json(pillar_items(12))

    result = await gateway.generate_pillars("en", "sourdough baking")

    assert result.ok
    assert len(result.items) == 12


async def test_requests_the_session_language(gateway, backend):
    pillar = Pillar(**pillar_items()[0])
    variation = LessonVariation(**variation_items()[0])

    await gateway.generate_variations("ko", "사워도우", pillar)
    await gateway.generate_questions("ko", "사워도우", pillar, variation)

    assert "Korean" in backend.calls("variations")[0].prompt
    assert "Korean" in backend.calls("questions")[0].prompt
    assert variation.title in backend.calls("questions")[0].prompt


async def test_openai_style_wrapped_response_is_accepted(gateway, backend):
    backend.script["questions"] = json.dumps({"items": question_items(25)})
    pillar = Pillar(**pillar_items()[0])
    variation = LessonVariation(**variation_items()[0])

    result = await gateway.generate_questions("en", "t", pillar, variation)

    assert len(result.items) == 25


@pytest.mark.parametrize("response", ["", "not json", '[{"id": "p1"}]', '{"oops": 1}'])
async def test_malformed_response_degrades_to_empty(gateway, backend, response):
    backend.script["pillars"] = response

    result = await gateway.generate_pillars("en", "topic")

    assert not result.ok
    assert result.items == []
    assert result.error


async def test_transport_failure_degrades_to_empty(gateway, backend):
    backend.script["variations"] = ConnectionError("network down")

    result = await gateway.generate_variations("en", "topic", Pillar(**pillar_items()[0]))

    assert result.items == []
    assert "network down" in result.error


async def test_missing_credential_degrades_like_transport_failure():
    gateway = GenerationGateway(GeminiBackend(model="gemini-2.5-flash", api_key=None))

    result = await gateway.generate_pillars("en", "topic")
    reply = await gateway.mentor_reply([], "ctx", "en", "topic")

    assert result.items == []
    assert "API key" in result.error
    assert reply == "I encountered an error. Please check your API key."


# =============================================================================
# Mentor
# =============================================================================

async def test_mentor_reply_sends_history_and_context(gateway, backend):
    history = [
        Message(role="mentor", text="Welcome"),
        Message(role="user", text="sourdough baking"),
    ]

    reply = await gateway.mentor_reply(history, 'Current Stage: ORIENTATION. Topic: "sourdough baking".', "en", "sourdough baking")

    assert reply == "Great topic! Shall we start?"
    request = backend.calls("mentor")[0]
    assert [t.role for t in request.history] == ["model", "user"]
    assert request.history[1].text == "sourdough baking"
    assert "Current Context: Current Stage: ORIENTATION." in request.system_instruction
    assert "Respond in English." in request.system_instruction
    assert request.temperature == 0.7


async def test_mentor_reply_apologizes_on_error_in_korean(gateway, backend):
    backend.script["mentor"] = RuntimeError("boom")

    reply = await gateway.mentor_reply([{"role": "user", "text": "hi"}], "ctx", "ko", None)

    assert reply == "오류가 발생했습니다."


async def test_mentor_reply_apologizes_on_empty_text(gateway, backend):
    backend.script["mentor"] = "   "

    reply = await gateway.mentor_reply([], "ctx", "en", None)

    assert reply == "I apologize, I'm having trouble connecting. Please try again."


async def test_each_call_is_a_single_attempt():
    backend = FakeBackend()
    backend.script["pillars"] = [TimeoutError("slow"), as_json(pillar_items())]
    gateway = GenerationGateway(backend)

    result = await gateway.generate_pillars("en", "topic")

    assert result.items == []
    assert len(backend.calls("pillars")) == 1
