"""Story Planner: turns a child's name and a theme into per-page scene descriptions."""

import logging
from typing import Optional

from agents.base_agent import BaseAgent
from config.exceptions import LLMResponseParseError
from config.settings import Settings
from tools.fallback import Outcome, Strategy, first_success
from tools.genai_client import STRING_ARRAY_SCHEMA, GenAIClient
from tools.llm_client import as_string_list

logger = logging.getLogger(__name__)


class StoryPlanner(BaseAgent):
    """Plans the book: one scene description per page."""

    def __init__(
        self,
        llm_client: Optional[GenAIClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(llm_client, settings)
        self._template = self._load_prompt("story_planner")
        self.last_outcome: Optional[Outcome[list[str]]] = None

    def build_prompt(self, child_name: str, theme: str, page_count: int) -> str:
        instruction = self._extract_section(self._template, "Outline Instruction")
        return self._fill(instruction, page_count=page_count, child_name=child_name, theme=theme)

    async def _ask(self, prompt: str, model: str, thinking_budget: Optional[int]) -> list[str]:
        result = await self.llm.generate_json(
            prompt,
            model=model,
            response_schema=STRING_ARRAY_SCHEMA,
            thinking_budget=thinking_budget,
        )
        try:
            return as_string_list(result)
        except ValueError as e:
            raise LLMResponseParseError(str(e), raw_response=str(result)) from e

    async def plan(self, child_name: str, theme: str, page_count: int) -> list[str]:
        """Ask for ``page_count`` scene descriptions.

        The high-capability tier is tried first with a thinking budget; the
        fast tier is retried with a stricter "array only" instruction.

        Returns:
            The scene descriptions in page order, or an empty list when every
            tier failed. An empty list is a failed plan, not a zero-page book.

        Raises:
            InvalidCredentialError: If the provider rejected the API key.
        """
        prompt = self.build_prompt(child_name, theme, page_count)
        strict_prompt = prompt + "\n" + self._extract_section(self._template, "Strict Suffix")

        logger.info("StoryPlanner: planning %d pages for '%s' (theme: %s)", page_count, child_name, theme)

        outcome = await first_success(
            [
                Strategy(
                    self.settings.story_model,
                    lambda: self._ask(prompt, self.settings.story_model, self.settings.story_thinking_budget),
                ),
                Strategy(
                    self.settings.fast_text_model,
                    lambda: self._ask(strict_prompt, self.settings.fast_text_model, None),
                ),
            ],
            label="StoryPlanner",
        )
        self.last_outcome = outcome

        if outcome.credential_rejected:
            raise outcome.error
        if not outcome.ok:
            logger.error("StoryPlanner: all tiers failed: %s", outcome.error)
            return []

        scenes = outcome.value or []
        logger.info("StoryPlanner: %d scenes planned via %s", len(scenes), outcome.tier)
        return scenes
