"""Image Renderer: draws one scene as black-and-white coloring-book line art."""

import logging
from typing import Optional, assert_never

from agents.base_agent import BaseAgent
from config.settings import Settings
from models.enums import AgeGroup, ArtStyle, AspectRatio, ImageSize
from models.page import RenderedImage
from tools.fallback import Outcome, Strategy, first_success
from tools.genai_client import GenAIClient

logger = logging.getLogger(__name__)


def complexity_section(age_group: AgeGroup) -> str:
    """Prompt section holding the complexity phrase for an age tier."""
    match age_group:
        case AgeGroup.TODDLER:
            return "Complexity: toddler"
        case AgeGroup.KIDS:
            return "Complexity: kids"
        case AgeGroup.EXPERT:
            return "Complexity: expert"
        case _:
            assert_never(age_group)


class ImageRenderer(BaseAgent):
    """Renders scene descriptions into coloring pages."""

    def __init__(
        self,
        llm_client: Optional[GenAIClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(llm_client, settings)
        self._template = self._load_prompt("image_renderer")
        self.last_outcome: Optional[Outcome[RenderedImage]] = None

    def build_prompt(self, scene: str, art_style: ArtStyle, age_group: AgeGroup) -> str:
        instruction = self._extract_section(self._template, "Page Instruction")
        complexity = self._extract_section(self._template, complexity_section(age_group))
        return self._fill(instruction, scene=scene, art_style=art_style.value, complexity=complexity)

    async def render(
        self,
        scene: str,
        art_style: ArtStyle = ArtStyle.WHIMSICAL,
        age_group: AgeGroup = AgeGroup.KIDS,
        aspect_ratio: AspectRatio = AspectRatio.PORTRAIT,
        image_size: ImageSize = ImageSize.LOW,
    ) -> Optional[RenderedImage]:
        """Render one page.

        The fallback tier takes the aspect ratio only; it has no resolution
        control, so ``image_size`` is not sent on the second attempt.

        Returns:
            The rendered image, or None when both tiers failed.

        Raises:
            InvalidCredentialError: If the provider rejected the API key.
        """
        prompt = self.build_prompt(scene, art_style, age_group)

        outcome = await first_success(
            [
                Strategy(
                    self.settings.image_model,
                    lambda: self.llm.generate_image(
                        prompt,
                        model=self.settings.image_model,
                        aspect_ratio=aspect_ratio.value,
                        image_size=image_size.value,
                    ),
                ),
                Strategy(
                    self.settings.fallback_image_model,
                    lambda: self.llm.generate_image(
                        prompt,
                        model=self.settings.fallback_image_model,
                        aspect_ratio=aspect_ratio.value,
                    ),
                ),
            ],
            accept=lambda image: image is not None and bool(image.data),
            label="ImageRenderer",
        )
        self.last_outcome = outcome

        if outcome.credential_rejected:
            raise outcome.error
        if not outcome.ok:
            logger.error("ImageRenderer: no image for scene '%s': %s", scene[:60], outcome.error)
            return None
        return outcome.value
