"""
Provider registry and runtime settings.

All model identifiers and keys are loaded from .env for easy configuration.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from dotenv import load_dotenv

load_dotenv()


@dataclass
class ProviderConfig:
    provider: str       # google | openai | anthropic
    name: str           # Human-readable name
    default_model: str  # Actual API model string
    env_keys: List[str] = field(default_factory=list)  # .env keys checked in order

    def api_key(self) -> Optional[str]:
        for key in self.env_keys:
            value = os.getenv(key)
            if value:
                return value
        return None


PROVIDERS: Dict[str, ProviderConfig] = {
    "google": ProviderConfig(
        provider="google",
        name="Google Gemini",
        default_model="gemini-2.5-flash",
        env_keys=["GEMINI_API_KEY", "GOOGLE_API_KEY"],
    ),
    "openai": ProviderConfig(
        provider="openai",
        name="OpenAI",
        default_model="gpt-4o",
        env_keys=["OPENAI_API_KEY"],
    ),
    "anthropic": ProviderConfig(
        provider="anthropic",
        name="Anthropic Claude",
        default_model="claude-sonnet-4-5-20250929",
        env_keys=["ANTHROPIC_API_KEY"],
    ),
}

DEFAULT_PROVIDER = "google"


@dataclass
class CoachSettings:
    provider: str = DEFAULT_PROVIDER
    model: Optional[str] = None
    mentor_temperature: float = 0.7
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])

    @property
    def provider_config(self) -> ProviderConfig:
        try:
            return PROVIDERS[self.provider]
        except KeyError:
            raise ValueError(f"Unknown provider: {self.provider}")

    @property
    def model_name(self) -> str:
        return self.model or self.provider_config.default_model


def load_settings() -> CoachSettings:
    """Build settings from the environment."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return CoachSettings(
        provider=os.getenv("COACH_PROVIDER", DEFAULT_PROVIDER).lower(),
        model=os.getenv("COACH_MODEL") or None,
        mentor_temperature=float(os.getenv("COACH_MENTOR_TEMPERATURE", "0.7")),
        log_level=os.getenv("COACH_LOG_LEVEL", "INFO").upper(),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )
