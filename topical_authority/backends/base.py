"""
Base class for all generation backends.

Each backend:
- Has a provider name matching an entry in the provider registry
- Receives one GenerationRequest (prompt or chat history, optional schema)
- Returns the raw response text, or raises on transport/credential failure

Backends never validate content shape; that is the gateway's job.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from topical_authority.errors import MissingCredentialError


class HistoryTurn(BaseModel):
    role: Literal["user", "model"]
    text: str


class GenerationRequest(BaseModel):
    """Provider-neutral request. Either prompt or history is set."""
    model: Optional[str] = None
    prompt: Optional[str] = None
    history: List[HistoryTurn] = Field(default_factory=list)
    response_schema: Optional[Dict[str, Any]] = None  # JSON-schema style, lowercase types
    temperature: Optional[float] = None
    system_instruction: Optional[str] = None

    @property
    def wants_json(self) -> bool:
        return self.response_schema is not None


class GenerationBackend(ABC):
    """Base class for provider transports."""

    provider: str = "base"

    def __init__(self, model: str, api_key: Optional[str] = None):
        self.model = model
        self.api_key = api_key

    def require_api_key(self) -> str:
        if not self.api_key:
            raise MissingCredentialError(f"No API key configured for provider '{self.provider}'")
        return self.api_key

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> str:
        """
        Execute one generation call.

        Args:
            request: prompt/history plus optional schema, temperature and system instruction

        Returns:
            The raw text of the model response (may be empty)
        """
        pass

    def model_for(self, request: GenerationRequest) -> str:
        return request.model or self.model
