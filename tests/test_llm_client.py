"""Tests for response parsing utilities and GenAIClient."""

import pytest
from types import SimpleNamespace
from unittest.mock import patch, MagicMock, AsyncMock

from google.genai import errors


def _text_response(text: str):
    return SimpleNamespace(text=text, candidates=[])


def _image_response(data: bytes = b"img", mime_type: str = "image/png"):
    part = SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def _api_error(code: int, message: str, status: str = "") -> errors.APIError:
    return errors.APIError(code, {"error": {"code": code, "message": message, "status": status}})


class TestParseJsonResponse:
    def test_direct_json_array(self):
        from tools.llm_client import parse_json_response
        assert parse_json_response('["a", "b"]') == ["a", "b"]

    def test_markdown_code_fence_with_lang(self):
        from tools.llm_client import parse_json_response
        text = '```json\n["one", "two"]\n```'
        assert parse_json_response(text) == ["one", "two"]

    def test_markdown_code_fence_without_lang(self):
        from tools.llm_client import parse_json_response
        text = '```\n{"key": "value"}\n```'
        assert parse_json_response(text) == {"key": "value"}

    def test_json_embedded_in_prose(self):
        from tools.llm_client import parse_json_response
        text = 'Here are your scenes: ["Mia on the moon", "Mia in a rocket"] Enjoy!'
        assert parse_json_response(text) == ["Mia on the moon", "Mia in a rocket"]

    def test_raw_newline_inside_string(self):
        from tools.llm_client import parse_json_response
        assert parse_json_response('["line one\nline two"]') == ["line one\nline two"]

    def test_invalid_raises_value_error(self):
        from tools.llm_client import parse_json_response
        with pytest.raises(ValueError, match="Failed to parse"):
            parse_json_response("no json here at all")


class TestAsStringList:
    def test_plain_list(self):
        from tools.llm_client import as_string_list
        assert as_string_list(["a", " b "]) == ["a", "b"]

    def test_drops_blank_and_non_string_items(self):
        from tools.llm_client import as_string_list
        assert as_string_list(["a", "", "  ", 3, None, "b"]) == ["a", "b"]

    def test_unwraps_single_list_object(self):
        from tools.llm_client import as_string_list
        assert as_string_list({"scenes": ["a", "b"]}) == ["a", "b"]

    def test_object_without_list_raises(self):
        from tools.llm_client import as_string_list
        with pytest.raises(ValueError):
            as_string_list({"title": "x"})

    def test_scalar_raises(self):
        from tools.llm_client import as_string_list
        with pytest.raises(ValueError):
            as_string_list("just text")


class TestCleanPlainText:
    @pytest.mark.parametrize("raw,expected", [
        ('"Space Dinosaurs"', "Space Dinosaurs"),
        ("  'Robot Olympics'  ", "Robot Olympics"),
        ("“Magical Castle”", "Magical Castle"),
        ("Plain Theme", "Plain Theme"),
        ('"', '"'),
    ])
    def test_strips_wrapping_quotes(self, raw, expected):
        from tools.llm_client import clean_plain_text
        assert clean_plain_text(raw) == expected


class TestTranslateApiError:
    def test_403_is_credential(self):
        from config.exceptions import InvalidCredentialError
        from tools.genai_client import translate_api_error
        err = translate_api_error(_api_error(403, "forbidden", "PERMISSION_DENIED"))
        assert isinstance(err, InvalidCredentialError)
        assert err.status == 403

    def test_invalid_key_message_is_credential(self):
        from config.exceptions import InvalidCredentialError
        from tools.genai_client import translate_api_error
        err = translate_api_error(_api_error(400, "API key not valid. Please pass a valid API key.", "INVALID_ARGUMENT"))
        assert isinstance(err, InvalidCredentialError)

    def test_entity_not_found_is_credential(self):
        from config.exceptions import InvalidCredentialError
        from tools.genai_client import translate_api_error
        err = translate_api_error(_api_error(404, "Requested entity was not found.", "NOT_FOUND"))
        assert isinstance(err, InvalidCredentialError)

    def test_429_is_rate_limit(self):
        from config.exceptions import LLMRateLimitError
        from tools.genai_client import translate_api_error
        assert isinstance(translate_api_error(_api_error(429, "slow down", "RESOURCE_EXHAUSTED")), LLMRateLimitError)

    def test_504_is_timeout(self):
        from config.exceptions import LLMTimeoutError
        from tools.genai_client import translate_api_error
        assert isinstance(translate_api_error(_api_error(504, "deadline", "DEADLINE_EXCEEDED")), LLMTimeoutError)

    def test_500_is_generic(self):
        from config.exceptions import CredentialError, LLMError
        from tools.genai_client import translate_api_error
        err = translate_api_error(_api_error(500, "internal", "INTERNAL"))
        assert isinstance(err, LLMError)
        assert not isinstance(err, CredentialError)


class TestGenAIClient:
    def test_missing_key_raises(self, settings):
        from config.exceptions import MissingCredentialError
        from tools.genai_client import GenAIClient
        settings.gemini_api_key = None
        with pytest.raises(MissingCredentialError):
            GenAIClient(settings)

    def test_explicit_key_overrides_settings(self, settings):
        from tools.genai_client import GenAIClient
        with patch("tools.genai_client.genai.Client") as mock_cls:
            GenAIClient(settings, api_key="other-key")
        mock_cls.assert_called_once_with(api_key="other-key")

    def _client(self, settings):
        from tools.genai_client import GenAIClient
        with patch("tools.genai_client.genai.Client") as mock_cls:
            client = GenAIClient(settings)
        return client, mock_cls.return_value

    @pytest.mark.asyncio
    async def test_generate_text(self, settings):
        client, sdk = self._client(settings)
        sdk.aio.models.generate_content = AsyncMock(return_value=_text_response("Hello"))
        assert await client.generate_text("hi") == "Hello"
        kwargs = sdk.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == settings.fast_text_model
        assert client.get_usage_summary() == {"total_calls": 1}

    @pytest.mark.asyncio
    async def test_generate_json_sets_schema_and_budget(self, settings):
        from tools.genai_client import STRING_ARRAY_SCHEMA
        client, sdk = self._client(settings)
        sdk.aio.models.generate_content = AsyncMock(return_value=_text_response('["a", "b"]'))
        result = await client.generate_json(
            "plan", model="m", response_schema=STRING_ARRAY_SCHEMA, thinking_budget=1024,
        )
        assert result == ["a", "b"]
        config = sdk.aio.models.generate_content.call_args.kwargs["config"]
        assert config.response_mime_type == "application/json"
        assert config.thinking_config.thinking_budget == 1024

    @pytest.mark.asyncio
    async def test_generate_json_unparseable_raises(self, settings):
        from config.exceptions import LLMResponseParseError
        client, sdk = self._client(settings)
        sdk.aio.models.generate_content = AsyncMock(return_value=_text_response("sorry, no"))
        with pytest.raises(LLMResponseParseError):
            await client.generate_json("plan")

    @pytest.mark.asyncio
    async def test_generate_image_returns_inline_data(self, settings):
        client, sdk = self._client(settings)
        sdk.aio.models.generate_content = AsyncMock(return_value=_image_response(b"png!", "image/png"))
        image = await client.generate_image("draw", model="img", aspect_ratio="3:4", image_size="2K")
        assert image.data == b"png!"
        config = sdk.aio.models.generate_content.call_args.kwargs["config"]
        assert config.image_config.aspect_ratio == "3:4"
        assert config.image_config.image_size == "2K"

    @pytest.mark.asyncio
    async def test_generate_image_aspect_only(self, settings):
        client, sdk = self._client(settings)
        sdk.aio.models.generate_content = AsyncMock(return_value=_image_response())
        await client.generate_image("draw", model="img", aspect_ratio="1:1")
        config = sdk.aio.models.generate_content.call_args.kwargs["config"]
        assert config.image_config.image_size is None

    @pytest.mark.asyncio
    async def test_generate_image_without_image_raises(self, settings):
        from config.exceptions import LLMError
        client, sdk = self._client(settings)
        sdk.aio.models.generate_content = AsyncMock(return_value=_text_response("I can't draw that"))
        with pytest.raises(LLMError, match="no image"):
            await client.generate_image("draw")

    @pytest.mark.asyncio
    async def test_api_error_is_translated(self, settings):
        from config.exceptions import InvalidCredentialError
        client, sdk = self._client(settings)
        sdk.aio.models.generate_content = AsyncMock(side_effect=_api_error(401, "bad key", "UNAUTHENTICATED"))
        with pytest.raises(InvalidCredentialError):
            await client.generate_text("hi")

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_llm_error(self, settings):
        from config.exceptions import LLMError
        client, sdk = self._client(settings)
        sdk.aio.models.generate_content = AsyncMock(side_effect=RuntimeError("socket closed"))
        with pytest.raises(LLMError, match="socket closed"):
            await client.generate_text("hi")

    @pytest.mark.asyncio
    async def test_chat_sends_history(self, settings):
        from models.enums import ChatRole
        from models.project import ChatMessage
        client, sdk = self._client(settings)
        chat_session = MagicMock()
        chat_session.send_message = AsyncMock(return_value=_text_response("Dinosaurs!"))
        sdk.aio.chats.create = MagicMock(return_value=chat_session)

        history = [ChatMessage(role=ChatRole.MODEL, text="Systems online.", timestamp=1)]
        reply = await client.chat(history, "ideas?", system_instruction="be helpful")

        assert reply == "Dinosaurs!"
        kwargs = sdk.aio.chats.create.call_args.kwargs
        assert kwargs["history"][0].role == "model"
        assert kwargs["history"][0].parts[0].text == "Systems online."
        chat_session.send_message.assert_awaited_once_with("ideas?")
