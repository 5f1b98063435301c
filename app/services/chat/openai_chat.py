"""
OpenAI Chat Service Implementation

Production relay using the official OpenAI Python SDK.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - OPENAI_API_KEY must be set in environment
"""

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from app.core.config import get_settings
from app.services.chat.base import BaseChatService, ChatResult

logger = logging.getLogger(__name__)


class OpenAIChatService(BaseChatService):
    """
    Forwards chat messages to OpenAI with a fixed model configuration.

    Model, max_tokens and temperature come from settings
    (gpt-4o / 16000 / 0.3 by default); callers only supply messages.
    """

    def __init__(self, client: AsyncOpenAI | None = None):
        """
        Raises:
            ValueError: If OPENAI_API_KEY is not configured and no client is given
        """
        settings = get_settings()

        if client is None and not settings.openai_api_key:
            raise ValueError(
                "OPENAI_API_KEY is required for production mode. "
                "Set it in your .env file or environment variables."
            )

        self.client = client or AsyncOpenAI(api_key=settings.openai_api_key)
        self.model = settings.openai_model
        self.max_tokens = settings.openai_max_tokens
        self.temperature = settings.openai_temperature

        logger.info(f"OpenAIChatService initialized (model={self.model})")

    @property
    def provider_name(self) -> str:
        return "openai"

    async def complete(self, messages: list[dict[str, Any]]) -> ChatResult:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API error: {e}")
            return ChatResult(success=False, error_message=str(e))

        return ChatResult(success=True, data=response.model_dump())
