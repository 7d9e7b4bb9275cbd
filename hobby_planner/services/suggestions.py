import logging

import anthropic
from fastapi import Depends

from hobby_planner.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Suggest a fun hobby session for next week."


class SuggestionError(Exception):
    pass


class SuggestionClient:
    """Relays a prompt to the text-generation API and returns the first completion."""

    def __init__(self, settings: Settings, client: anthropic.Anthropic | None = None):
        self.model = settings.SUGGESTION_MODEL
        self.max_tokens = settings.SUGGESTION_MAX_TOKENS
        if client is not None:
            self.client = client
        elif settings.ANTHROPIC_API_KEY:
            self.client = anthropic.Anthropic(
                api_key=settings.ANTHROPIC_API_KEY,
                timeout=settings.SUGGESTION_TIMEOUT,
                max_retries=0,
            )
        else:
            self.client = None

    def is_available(self) -> bool:
        return self.client is not None

    def suggest(self, prompt: str | None = None) -> str:
        if not self.is_available():
            logger.warning("ANTHROPIC_API_KEY not configured. Suggestions are disabled.")
            raise SuggestionError("Suggestion service is not configured")

        prompt = prompt or DEFAULT_PROMPT
        logger.info("Requesting session suggestion (model=%s)", self.model)
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.error(f"Suggestion request failed: {e}")
            raise SuggestionError("Failed to generate suggestion") from e

        for block in response.content:
            if block.type == "text":
                return block.text
        raise SuggestionError("Suggestion response contained no text")


def get_suggestion_client(settings: Settings = Depends(get_settings)) -> SuggestionClient:
    return SuggestionClient(settings)
