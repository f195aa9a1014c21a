"""Tools package — Gemini client, fallback chain, and response parsing."""

from tools.genai_client import GenAIClient, STRING_ARRAY_SCHEMA, translate_api_error
from tools.fallback import Strategy, Outcome, first_success
from tools.llm_client import parse_json_response, as_string_list, clean_plain_text

__all__ = [
    "GenAIClient",
    "STRING_ARRAY_SCHEMA",
    "translate_api_error",
    "Strategy",
    "Outcome",
    "first_success",
    "parse_json_response",
    "as_string_list",
    "clean_plain_text",
]
