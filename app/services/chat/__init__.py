"""
Chat Service Factory

Returns the mock relay or the OpenAI relay based on ENV_MODE.
"""

import logging
from functools import lru_cache

from app.core.config import get_settings
from app.services.chat.base import BaseChatService, ChatResult
from app.services.chat.mock import MockChatService
from app.services.chat.openai_chat import OpenAIChatService

logger = logging.getLogger(__name__)


@lru_cache()
def get_chat_service() -> BaseChatService:
    """Get the configured chat relay."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Chat Service: Using MockChatService (development mode)")
        return MockChatService(model=settings.openai_model)
    else:
        logger.info(f"Chat Service: Using OpenAIChatService ({settings.env_mode.value} mode)")
        return OpenAIChatService()


def reset_chat_service() -> None:
    """Clear the cached service instance."""
    get_chat_service.cache_clear()


__all__ = [
    "get_chat_service",
    "reset_chat_service",
    "BaseChatService",
    "ChatResult",
    "MockChatService",
    "OpenAIChatService",
]
