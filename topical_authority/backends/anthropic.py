"""Anthropic Claude backend. The schema is described in the system prompt."""

import json
from typing import Any, Dict, List, Optional

from anthropic import AsyncAnthropic

from topical_authority.backends.base import GenerationBackend, GenerationRequest, HistoryTurn

MAX_TOKENS = 8192


def alternate_turns(history: List[HistoryTurn]) -> List[Dict[str, str]]:
    """
    Claude wants a user turn first and strictly alternating roles:
    leading model turns are dropped and consecutive same-role turns merged.
    """
    messages: List[Dict[str, str]] = []
    for turn in history:
        role = "assistant" if turn.role == "model" else "user"
        if not messages and role == "assistant":
            continue
        if messages and messages[-1]["role"] == role:
            messages[-1]["content"] += "\n\n" + turn.text
        else:
            messages.append({"role": role, "content": turn.text})
    return messages


class AnthropicBackend(GenerationBackend):
    provider = "anthropic"

    def __init__(self, model: str, api_key: Optional[str] = None):
        super().__init__(model, api_key)
        self._client: Optional[AsyncAnthropic] = None

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            self._client = AsyncAnthropic(api_key=self.require_api_key())
        return self._client

    async def generate(self, request: GenerationRequest) -> str:
        system_parts = []
        if request.system_instruction:
            system_parts.append(request.system_instruction)
        if request.wants_json:
            system_parts.append(
                "Respond with ONLY a JSON array matching this JSON schema, no prose:\n"
                f"{json.dumps(request.response_schema, indent=2)}"
            )

        if request.history:
            messages = alternate_turns(request.history)
        else:
            messages = [{"role": "user", "content": request.prompt or ""}]

        params: Dict[str, Any] = {
            "model": self.model_for(request),
            "max_tokens": MAX_TOKENS,
            "messages": messages,
        }
        if system_parts:
            params["system"] = "\n\n".join(system_parts)
        if request.temperature is not None:
            params["temperature"] = request.temperature

        response = await self.client.messages.create(**params)
        return "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
