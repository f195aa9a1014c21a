"""Gemini SDK wrapper used by every agent."""

import logging
from typing import Any, Iterable, Optional

from google import genai
from google.genai import errors, types

from config.exceptions import (
    InvalidCredentialError,
    LLMError,
    LLMRateLimitError,
    LLMResponseParseError,
    LLMTimeoutError,
    MissingCredentialError,
)
from config.settings import Settings
from models.page import RenderedImage
from models.project import ChatMessage
from tools.llm_client import parse_json_response

logger = logging.getLogger(__name__)

# Provider messages that mean the key itself is bad, whatever the HTTP code
_CREDENTIAL_MARKERS = (
    "API key not valid",
    "API_KEY_INVALID",
    "Requested entity was not found",
    "PERMISSION_DENIED",
)

STRING_ARRAY_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(type=types.Type.STRING),
)


def translate_api_error(error: Exception) -> LLMError | InvalidCredentialError:
    """Map an SDK error onto the project's exception hierarchy."""
    code = getattr(error, "code", None)
    message = str(error)
    if code in (401, 403) or any(marker in message for marker in _CREDENTIAL_MARKERS):
        return InvalidCredentialError(f"Gemini rejected the API key: {message[:200]}", status=code)
    if code == 429:
        return LLMRateLimitError(f"Gemini rate limit: {message[:200]}")
    if code in (408, 504) or "DEADLINE_EXCEEDED" in message:
        return LLMTimeoutError(f"Gemini request timed out: {message[:200]}")
    return LLMError(f"Gemini request failed: {message[:200]}", {"status": code} if code else None)


def _response_text(response) -> str:
    text = getattr(response, "text", None)
    if text:
        return text
    out = []
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            if getattr(part, "text", None):
                out.append(part.text)
    return "\n".join(out).strip()


def _response_image(response) -> Optional[RenderedImage]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            return RenderedImage(data=inline.data, mime_type=inline.mime_type or "image/png")
    return None


class GenAIClient:
    """Async Gemini client.

    All SDK failures are re-raised as ``LLMError`` subclasses, except a
    rejected key which becomes ``InvalidCredentialError`` so callers can stop
    instead of retrying on another tier.
    """

    def __init__(self, settings: Optional[Settings] = None, api_key: Optional[str] = None):
        self.settings = settings or Settings()
        key = api_key or self.settings.gemini_api_key
        if not key or not key.strip():
            raise MissingCredentialError()
        self.client = genai.Client(api_key=key)
        self.total_calls = 0

    async def _generate(self, model: str, contents: Any, config: Optional[types.GenerateContentConfig]):
        self.total_calls += 1
        logger.debug("Gemini call: model=%s", model)
        try:
            return await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except errors.APIError as e:
            raise translate_api_error(e) from e
        except Exception as e:
            raise LLMError(f"Gemini request failed: {e}") from e

    async def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
    ) -> str:
        """Send a prompt and return the plain-text answer (may be empty)."""
        model = model or self.settings.fast_text_model
        config = None
        if system_instruction:
            config = types.GenerateContentConfig(system_instruction=system_instruction)
        response = await self._generate(model, prompt, config)
        text = _response_text(response)
        if not text:
            logger.warning("Gemini returned no text (model=%s)", model)
        return text

    async def generate_json(
        self,
        prompt: str,
        model: Optional[str] = None,
        response_schema: Optional[types.Schema] = None,
        thinking_budget: Optional[int] = None,
    ) -> Any:
        """Request JSON output and parse it.

        Raises:
            LLMResponseParseError: If the response holds no JSON.
        """
        model = model or self.settings.fast_text_model
        config_kwargs: dict[str, Any] = {"response_mime_type": "application/json"}
        if response_schema is not None:
            config_kwargs["response_schema"] = response_schema
        if thinking_budget:
            config_kwargs["thinking_config"] = types.ThinkingConfig(thinking_budget=thinking_budget)
        response = await self._generate(model, prompt, types.GenerateContentConfig(**config_kwargs))
        text = _response_text(response) or "[]"
        try:
            return parse_json_response(text)
        except ValueError as e:
            raise LLMResponseParseError(str(e), raw_response=text) from e

    async def generate_image(
        self,
        prompt: str,
        model: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
        image_size: Optional[str] = None,
    ) -> RenderedImage:
        """Request a single image.

        Raises:
            LLMError: If the call fails or the response carries no image.
        """
        model = model or self.settings.image_model
        image_kwargs: dict[str, str] = {}
        if aspect_ratio:
            image_kwargs["aspect_ratio"] = aspect_ratio
        if image_size:
            image_kwargs["image_size"] = image_size
        config = types.GenerateContentConfig(image_config=types.ImageConfig(**image_kwargs))
        contents = types.Content(role="user", parts=[types.Part(text=prompt)])

        response = await self._generate(model, contents, config)
        image = _response_image(response)
        if image is None:
            raise LLMError("Gemini returned no image", {"model": model})
        logger.debug("Gemini image: %d bytes, %s", len(image.data), image.mime_type)
        return image

    async def chat(
        self,
        history: Iterable[ChatMessage],
        message: str,
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
    ) -> str:
        """Send one chat turn on top of ``history`` and return the reply text."""
        model = model or self.settings.fast_text_model
        contents = [
            types.Content(role=m.role.value, parts=[types.Part(text=m.text)])
            for m in history
        ]
        config = types.GenerateContentConfig(system_instruction=system_instruction) if system_instruction else None
        self.total_calls += 1
        logger.debug("Gemini chat: model=%s, history=%d", model, len(contents))
        try:
            session = self.client.aio.chats.create(model=model, history=contents, config=config)
            response = await session.send_message(message)
        except errors.APIError as e:
            raise translate_api_error(e) from e
        except Exception as e:
            raise LLMError(f"Gemini chat failed: {e}") from e
        return _response_text(response)

    def get_usage_summary(self) -> dict:
        """Return call count statistics."""
        return {"total_calls": self.total_calls}
