"""Provider backends and settings. SDK clients are replaced with mocks."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from topical_authority.backends import BACKEND_REGISTRY, create_backend
from topical_authority.backends.anthropic import AnthropicBackend, alternate_turns
from topical_authority.backends.base import GenerationRequest, HistoryTurn
from topical_authority.backends.google import GeminiBackend, to_gemini_schema
from topical_authority.backends.openai import OpenAIBackend
from topical_authority.config import CoachSettings, load_settings
from topical_authority.errors import MissingCredentialError
from topical_authority.gateway import item_schema
from topical_authority.models import AudienceQuestion, Pillar


def json_request(**overrides):
    params = dict(
        model=None,
        prompt="Generate pillars",
        response_schema=item_schema(Pillar),
        temperature=None,
    )
    params.update(overrides)
    return GenerationRequest(**params)


def mentor_request(**overrides):
    params = dict(
        model=None,
        history=[HistoryTurn(role="model", text="Welcome"), HistoryTurn(role="user", text="sourdough")],
        system_instruction="You are a mentor.",
        temperature=0.7,
    )
    params.update(overrides)
    return GenerationRequest(**params)


# =============================================================================
# Google
# =============================================================================

def test_gemini_schema_types_are_upper_case():
    schema = to_gemini_schema(item_schema(AudienceQuestion))

    assert schema["type"] == "ARRAY"
    assert schema["items"]["type"] == "OBJECT"
    assert schema["items"]["properties"]["intent"]["type"] == "STRING"
    assert schema["items"]["required"] == ["id", "question", "intent"]


async def test_gemini_generate_passes_schema_and_history():
    backend = GeminiBackend(model="gemini-2.5-flash", api_key="key")
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text="hello"))
    backend._client = client

    assert await backend.generate(mentor_request()) == "hello"
    kwargs = client.aio.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"
    assert [c.role for c in kwargs["contents"]] == ["model", "user"]
    assert kwargs["config"].system_instruction == "You are a mentor."

    await backend.generate(json_request())
    config = client.aio.models.generate_content.call_args.kwargs["config"]
    assert config.response_mime_type == "application/json"


async def test_gemini_without_key_raises_missing_credential():
    backend = GeminiBackend(model="gemini-2.5-flash", api_key=None)
    with pytest.raises(MissingCredentialError):
        await backend.generate(json_request())


# =============================================================================
# OpenAI
# =============================================================================

def test_openai_json_mode_messages():
    backend = OpenAIBackend(model="gpt-4o", api_key="key")

    messages = backend.build_messages(json_request())

    assert messages[0]["role"] == "system"
    assert '"items"' in messages[0]["content"]
    assert messages[1] == {"role": "user", "content": "Generate pillars"}


def test_openai_mentor_messages_map_roles():
    backend = OpenAIBackend(model="gpt-4o", api_key="key")

    messages = backend.build_messages(mentor_request())

    assert [m["role"] for m in messages] == ["system", "assistant", "user"]


async def test_openai_generate_skips_temperature_for_reasoning_models():
    backend = OpenAIBackend(model="o3-mini", api_key="key")
    create = AsyncMock(return_value=SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content='{"items": []}'))]
    ))
    backend._client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))

    text = await backend.generate(json_request(temperature=0.4))

    assert text == '{"items": []}'
    kwargs = create.call_args.kwargs
    assert "temperature" not in kwargs
    assert kwargs["response_format"] == {"type": "json_object"}


# =============================================================================
# Anthropic
# =============================================================================

def test_alternate_turns_starts_with_user_and_merges():
    turns = [
        HistoryTurn(role="model", text="Welcome"),
        HistoryTurn(role="user", text="sourdough"),
        HistoryTurn(role="user", text="baking"),
        HistoryTurn(role="model", text="Great"),
    ]

    assert alternate_turns(turns) == [
        {"role": "user", "content": "sourdough\n\nbaking"},
        {"role": "assistant", "content": "Great"},
    ]


async def test_anthropic_generate_joins_text_blocks():
    backend = AnthropicBackend(model="claude-sonnet-4-5-20250929", api_key="key")
    create = AsyncMock(return_value=SimpleNamespace(content=[
        SimpleNamespace(type="text", text="[]"),
        SimpleNamespace(type="tool_use", text="ignored"),
    ]))
    backend._client = SimpleNamespace(messages=SimpleNamespace(create=create))

    assert await backend.generate(json_request()) == "[]"
    kwargs = create.call_args.kwargs
    assert "JSON array" in kwargs["system"]
    assert kwargs["messages"] == [{"role": "user", "content": "Generate pillars"}]


# =============================================================================
# Settings
# =============================================================================

def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("COACH_PROVIDER", "OpenAI")
    monkeypatch.setenv("COACH_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("COACH_MENTOR_TEMPERATURE", "0.3")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")

    settings = load_settings()

    assert settings.provider == "openai"
    assert settings.model_name == "gpt-4o-mini"
    assert settings.mentor_temperature == 0.3
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_default_model_comes_from_provider():
    assert CoachSettings(provider="google").model_name == "gemini-2.5-flash"


def test_google_key_falls_back_to_google_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("GOOGLE_API_KEY", "g-key")

    backend = create_backend(CoachSettings(provider="google"))

    assert isinstance(backend, GeminiBackend)
    assert backend.api_key == "g-key"


def test_create_backend_rejects_unknown_provider():
    with pytest.raises(ValueError):
        create_backend(CoachSettings(provider="mystery"))
    assert set(BACKEND_REGISTRY) == {"google", "openai", "anthropic"}
