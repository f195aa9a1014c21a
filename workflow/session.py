"""Application session: one credential, one set of stores, at most one run."""

import logging
from typing import Optional

from agents.assistant import ChatAssistant
from agents.image_renderer import ImageRenderer
from agents.story_planner import StoryPlanner
from agents.theme_oracle import ThemeOracle
from config.exceptions import RunInProgressError
from config.settings import Settings
from models.book import BookConfig
from models.enums import AbortReason
from storage.kv_store import KeyValueStore
from storage.preferences import PreferenceStore
from storage.project_store import ProjectStore
from tools.genai_client import GenAIClient
from workflow.pipeline import GenerationPipeline, run_to_completion
from workflow.state import RunResult

logger = logging.getLogger(__name__)


class AppSession:
    """Owns the per-process state that used to live in the page.

    The Gemini client is built on first use so history and preferences work
    without a key. A run that ends with a credential rejection drops the client;
    the next call builds a fresh one from ``settings`` or a newly set key.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[GenAIClient] = None,
        kv: Optional[KeyValueStore] = None,
    ):
        self.settings = settings or Settings()
        self.kv = kv or KeyValueStore(self.settings.store_db_path, self.settings.storage_quota_bytes)
        self.projects = ProjectStore(self.kv, limit=self.settings.history_limit)
        self.projects.load()
        self.preferences = PreferenceStore(self.kv)
        self._client = client
        self._api_key: Optional[str] = None
        self.credential_valid = True
        self._running = False

    @property
    def client(self) -> GenAIClient:
        """Lazily built Gemini client; raises ``MissingCredentialError`` without a key."""
        if self._client is None:
            self._client = GenAIClient(self.settings, api_key=self._api_key)
            self.credential_valid = True
        return self._client

    @property
    def is_running(self) -> bool:
        return self._running

    def set_api_key(self, api_key: str) -> None:
        """Replace the credential; the next model call uses it."""
        self._api_key = api_key
        self._client = None
        self.credential_valid = True

    def invalidate_credential(self) -> None:
        logger.warning("Credential rejected by provider; a new key is required")
        self._client = None
        self.credential_valid = False

    def oracle(self) -> ThemeOracle:
        return ThemeOracle(self.client, self.settings)

    def assistant(self) -> ChatAssistant:
        return ChatAssistant(self.client, self.settings)

    def pipeline(self) -> GenerationPipeline:
        client = self.client
        return GenerationPipeline(
            planner=StoryPlanner(client, self.settings),
            renderer=ImageRenderer(client, self.settings),
            oracle=ThemeOracle(client, self.settings),
            store=self.projects,
            settings=self.settings,
        )

    async def generate(self, config: BookConfig, callback=None) -> RunResult:
        """Run the pipeline to the end for ``config``.

        Raises:
            RunInProgressError: If another run of this session has not finished.
            MissingCredentialError: If no key is configured.
        """
        if self._running:
            raise RunInProgressError("A book is already being generated in this session.")
        pipeline = self.pipeline()
        self._running = True
        try:
            result = await run_to_completion(pipeline, config, callback)
        finally:
            self._running = False
        if result.abort_reason == AbortReason.CREDENTIAL:
            self.invalidate_credential()
        return result
