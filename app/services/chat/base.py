"""
Chat Completion Service Abstract Base Class

Defines the interface for relaying a message sequence to a chat-completion
provider with a fixed model configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ChatResult:
    """
    Result from a relayed chat completion.

    Attributes:
        success: Whether the provider returned a completion
        data: Provider response body (OpenAI chat.completion shape)
        error_message: Error description if the call failed
    """
    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None


class BaseChatService(ABC):
    """Abstract base class for chat completion relays."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def complete(self, messages: list[dict[str, Any]]) -> ChatResult:
        """
        Forward ``messages`` to the provider.

        Args:
            messages: Chat messages, e.g. ``[{"role": "user", "content": "hi"}]``

        Returns:
            ChatResult: The provider's response body on success
        """
        pass
