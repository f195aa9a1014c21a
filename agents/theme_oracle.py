"""Theme Oracle: random, enhanced, and suggested coloring book themes."""

import logging
import random
from typing import Optional

from agents.base_agent import BaseAgent
from config.exceptions import LLMResponseParseError
from config.settings import Settings
from tools.fallback import Strategy, first_success
from tools.genai_client import STRING_ARRAY_SCHEMA, GenAIClient
from tools.llm_client import as_string_list, clean_plain_text

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTIONS = [
    "Space Dinosaurs",
    "Underwater Kingdom",
    "Robot Olympics",
    "Magical Castle",
    "Super Hero Pets",
]


class ThemeOracle(BaseAgent):
    """Single-shot theme helpers. Every call has a local fallback and never raises."""

    def __init__(
        self,
        llm_client: Optional[GenAIClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(llm_client, settings)
        self._template = self._load_prompt("theme_oracle")

    async def _ask_text(self, prompt: str) -> str:
        text = await self.llm.generate_text(prompt, model=self.settings.fast_text_model)
        return clean_plain_text(text)

    async def random_theme(self) -> str:
        """Invent one short theme title (max 5 words)."""
        seed = random.randint(0, 9999)
        prompt = self._fill(self._extract_section(self._template, "Random Theme"), seed=seed)
        outcome = await first_success(
            [Strategy(self.settings.fast_text_model, lambda: self._ask_text(prompt))],
            label="ThemeOracle.random_theme",
        )
        if not outcome.ok:
            return self.settings.default_theme
        logger.info("ThemeOracle: random theme '%s'", outcome.value)
        return outcome.value

    async def enhance_theme(self, theme: str) -> str:
        """Rewrite ``theme`` into a livelier prompt (under 10 words); returns it unchanged on failure."""
        prompt = self._fill(self._extract_section(self._template, "Enhance Theme"), theme=theme)
        outcome = await first_success(
            [Strategy(self.settings.fast_text_model, lambda: self._ask_text(prompt))],
            label="ThemeOracle.enhance_theme",
        )
        return outcome.value if outcome.ok else theme

    async def suggestions(self, count: int = 5) -> list[str]:
        prompt = self._fill(self._extract_section(self._template, "Suggestions"), count=count)

        async def ask() -> list[str]:
            result = await self.llm.generate_json(
                prompt,
                model=self.settings.fast_text_model,
                response_schema=STRING_ARRAY_SCHEMA,
            )
            try:
                return as_string_list(result)[:count]
            except ValueError as e:
                raise LLMResponseParseError(str(e), raw_response=str(result)) from e

        outcome = await first_success(
            [Strategy(self.settings.fast_text_model, ask)],
            label="ThemeOracle.suggestions",
        )
        return outcome.value if outcome.ok else list(DEFAULT_SUGGESTIONS)

    async def prompt_button(self, theme: str) -> str:
        """Blank theme: invent one. Otherwise: enhance what the user typed."""
        if not theme.strip():
            return await self.random_theme()
        return await self.enhance_theme(theme)
