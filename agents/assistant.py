"""Chat assistant for brainstorming book ideas."""

import logging
from typing import Iterable, Optional

from agents.base_agent import BaseAgent
from config.settings import Settings
from models.project import ChatMessage
from tools.fallback import Strategy, first_success
from tools.genai_client import GenAIClient

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I'm having trouble connecting right now."


class ChatAssistant(BaseAgent):
    """Stateless per turn: the caller owns the history and passes it every time."""

    def __init__(
        self,
        llm_client: Optional[GenAIClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(llm_client, settings)
        template = self._load_prompt("assistant")
        self.system_instruction = self._extract_section(template, "System Prompt")
        self.greeting = self._extract_section(template, "Greeting")

    async def reply(self, history: Iterable[ChatMessage], message: str) -> str:
        """Answer ``message`` given the prior turns; returns a fixed apology on failure."""
        history = list(history)
        outcome = await first_success(
            [
                Strategy(
                    self.settings.fast_text_model,
                    lambda: self.llm.chat(
                        history,
                        message,
                        model=self.settings.fast_text_model,
                        system_instruction=self.system_instruction,
                    ),
                )
            ],
            accept=lambda text: text is not None,
            label="ChatAssistant",
        )
        if not outcome.ok:
            return FALLBACK_REPLY
        return outcome.value
