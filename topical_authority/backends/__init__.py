"""
Generation Backends

One transport per provider. The gateway talks to whichever backend the
settings select; tests substitute an in-memory backend.
"""

from typing import Dict, Type

from topical_authority.backends.base import GenerationBackend, GenerationRequest, HistoryTurn
from topical_authority.backends.google import GeminiBackend
from topical_authority.backends.openai import OpenAIBackend
from topical_authority.backends.anthropic import AnthropicBackend
from topical_authority.config import CoachSettings

# Registry: provider → class
BACKEND_REGISTRY: Dict[str, Type[GenerationBackend]] = {
    "google": GeminiBackend,
    "openai": OpenAIBackend,
    "anthropic": AnthropicBackend,
}


def create_backend(settings: CoachSettings) -> GenerationBackend:
    """Factory: instantiate the backend selected by settings."""
    cls = BACKEND_REGISTRY.get(settings.provider)
    if not cls:
        raise ValueError(f"Unknown provider: {settings.provider}")
    return cls(model=settings.model_name, api_key=settings.provider_config.api_key())
