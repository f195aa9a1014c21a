"""Agents package — all model-backed agent classes."""

from agents.base_agent import BaseAgent
from agents.story_planner import StoryPlanner
from agents.image_renderer import ImageRenderer
from agents.theme_oracle import ThemeOracle
from agents.assistant import ChatAssistant

__all__ = [
    "BaseAgent",
    "StoryPlanner",
    "ImageRenderer",
    "ThemeOracle",
    "ChatAssistant",
]
