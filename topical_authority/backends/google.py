"""Google Gemini backend (google-genai SDK)."""

from typing import Any, Dict, Optional

from google import genai
from google.genai import types

from topical_authority.backends.base import GenerationBackend, GenerationRequest


def to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Gemini's Schema type enum is upper case ("ARRAY", "OBJECT", "STRING")."""
    converted: Dict[str, Any] = {}
    for key, value in schema.items():
        if key == "type" and isinstance(value, str):
            converted[key] = value.upper()
        elif key == "items" and isinstance(value, dict):
            converted[key] = to_gemini_schema(value)
        elif key == "properties" and isinstance(value, dict):
            converted[key] = {name: to_gemini_schema(prop) for name, prop in value.items()}
        else:
            converted[key] = value
    return converted


class GeminiBackend(GenerationBackend):
    provider = "google"

    def __init__(self, model: str, api_key: Optional[str] = None):
        super().__init__(model, api_key)
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.require_api_key())
        return self._client

    async def generate(self, request: GenerationRequest) -> str:
        if request.history:
            contents = [
                types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.text)])
                for turn in request.history
            ]
        else:
            contents = request.prompt or ""

        params: Dict[str, Any] = {
            "system_instruction": request.system_instruction,
            "temperature": request.temperature,
        }
        if request.wants_json:
            params["response_mime_type"] = "application/json"
            params["response_schema"] = to_gemini_schema(request.response_schema)

        response = await self.client.aio.models.generate_content(
            model=self.model_for(request),
            contents=contents,
            config=types.GenerateContentConfig(**params),
        )
        return response.text or ""
