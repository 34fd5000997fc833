"""
Gemini client used by every AI task.

The rest of the application talks to the provider only through
:class:`AIClient`, which accepts a resolved :class:`EffectiveConfig` plus
plain-text prompts and returns the model's raw text. Tests substitute a fake
implementation.
"""

import logging
from typing import Any, Dict, List, Optional

import google.generativeai as genai

from resume_builder.core.exceptions import AIProcessingError, ConfigError
from resume_builder.services.ai.defaults import EffectiveConfig

logger = logging.getLogger(__name__)

# Keys the provider's Schema message understands
_SCHEMA_KEYS = {"type", "format", "description", "nullable", "enum", "properties", "required", "items"}

_GENERATION_KEYS = {
    "temperature": "temperature",
    "topP": "top_p",
    "topK": "top_k",
    "maxOutputTokens": "max_output_tokens",
    "stopSequences": "stop_sequences",
    "responseMimeType": "response_mime_type",
    "responseSchema": "response_schema",
}


def sanitize_schema(schema: Any) -> Any:
    """Drop JSON-schema keywords the provider rejects (maxLength, minimum, ...)."""
    if not isinstance(schema, dict):
        return schema

    cleaned: Dict[str, Any] = {}
    for key, value in schema.items():
        if key not in _SCHEMA_KEYS:
            continue
        if key == "properties":
            cleaned[key] = {name: sanitize_schema(prop) for name, prop in value.items()}
        elif key == "items":
            cleaned[key] = sanitize_schema(value)
        else:
            cleaned[key] = value
    return cleaned


def to_generation_config(generation_config: Dict[str, Any]) -> Dict[str, Any]:
    """Translate the stored camelCase generation config to the SDK's keyword names."""
    translated: Dict[str, Any] = {}
    for key, value in generation_config.items():
        sdk_key = _GENERATION_KEYS.get(key)
        if sdk_key is None or value is None:
            continue
        if sdk_key == "stop_sequences" and not value:
            continue
        if sdk_key == "response_schema":
            value = sanitize_schema(value)
        translated[sdk_key] = value
    return translated


class AIClient:
    """Interface for the generative-AI service."""

    async def generate(self, config: EffectiveConfig, prompt: str) -> str:
        """Single-shot call; returns the raw response text."""
        raise NotImplementedError

    async def chat(self, config: EffectiveConfig, history: List[Dict[str, Any]], message: str) -> str:
        """
        Chat-session call replaying ``history`` before ``message``.

        Args:
            history: Provider-ready turns, ``{"role": "user"|"model", "parts": [text]}``
        """
        raise NotImplementedError


class GeminiClient(AIClient):
    """Google Gemini implementation of :class:`AIClient`."""

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key
        self._configured = False

    def _ensure_configured(self) -> None:
        if not self.api_key:
            logger.error("GEMINI_API_KEY is not set")
            raise ConfigError("Server configuration error: Missing API Key.")
        if not self._configured:
            genai.configure(api_key=self.api_key)
            self._configured = True

    def _build_model(self, config: EffectiveConfig) -> "genai.GenerativeModel":
        self._ensure_configured()
        return genai.GenerativeModel(
            model_name=config.model_name,
            generation_config=to_generation_config(config.generation_config),
            safety_settings=config.safety_settings,
            system_instruction=config.system_instruction,
        )

    async def generate(self, config: EffectiveConfig, prompt: str) -> str:
        model = self._build_model(config)
        try:
            response = await model.generate_content_async(prompt)
            return response.text
        except Exception as e:
            logger.error(f"Gemini API error for task {config.task_name}: {e}")
            raise AIProcessingError("Failed to process text with AI", details={"error": str(e)})

    async def chat(self, config: EffectiveConfig, history: List[Dict[str, Any]], message: str) -> str:
        model = self._build_model(config)
        try:
            session = model.start_chat(history=history)
            response = await session.send_message_async(message)
            return response.text
        except Exception as e:
            logger.error(f"Gemini chat error for task {config.task_name}: {e}")
            raise AIProcessingError("Failed to process chat message with AI", details={"error": str(e)})
