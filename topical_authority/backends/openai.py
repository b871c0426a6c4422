"""OpenAI backend. Structured output goes through JSON mode."""

import json
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from topical_authority.backends.base import GenerationBackend, GenerationRequest

# Reasoning models reject a custom temperature
MODELS_WITHOUT_TEMP = ['gpt-5', 'o1', 'o1-mini', 'o1-preview', 'o3-mini']


def json_mode_instruction(schema: Dict[str, Any]) -> str:
    """JSON mode only returns objects, so the array is wrapped under "items"."""
    return (
        "Always respond with valid JSON: an object with a single key \"items\" "
        "whose value is an array matching this JSON schema:\n"
        f"{json.dumps(schema, indent=2)}"
    )


class OpenAIBackend(GenerationBackend):
    provider = "openai"

    def __init__(self, model: str, api_key: Optional[str] = None):
        super().__init__(model, api_key)
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.require_api_key())
        return self._client

    def build_messages(self, request: GenerationRequest) -> List[Dict[str, str]]:
        system_parts = []
        if request.system_instruction:
            system_parts.append(request.system_instruction)
        if request.wants_json:
            system_parts.append(json_mode_instruction(request.response_schema))

        messages = []
        if system_parts:
            messages.append({"role": "system", "content": "\n\n".join(system_parts)})
        if request.history:
            for turn in request.history:
                role = "assistant" if turn.role == "model" else "user"
                messages.append({"role": role, "content": turn.text})
        else:
            messages.append({"role": "user", "content": request.prompt or ""})
        return messages

    async def generate(self, request: GenerationRequest) -> str:
        model_name = self.model_for(request)
        params: Dict[str, Any] = {
            "model": model_name,
            "messages": self.build_messages(request),
        }
        if request.wants_json:
            params["response_format"] = {"type": "json_object"}
        if request.temperature is not None and model_name not in MODELS_WITHOUT_TEMP:
            params["temperature"] = request.temperature

        response = await self.client.chat.completions.create(**params)
        return response.choices[0].message.content or ""
