"""
Mock Chat Service Implementation

Answers with a canned completion in the OpenAI response shape so the chat
relay can be exercised without an API key.
"""

import logging
import time
import uuid
from typing import Any

from app.services.chat.base import BaseChatService, ChatResult

logger = logging.getLogger(__name__)


class MockChatService(BaseChatService):
    """Echoes the last user message back as the assistant reply."""

    def __init__(self, model: str = "gpt-4o"):
        self.model = model
        logger.info(f"MockChatService initialized (model={model})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def complete(self, messages: list[dict[str, Any]]) -> ChatResult:
        last_user = next(
            (m.get("content", "") for m in reversed(messages)
             if isinstance(m, dict) and m.get("role") == "user"),
            "",
        )
        reply = f"[mock] {last_user}" if last_user else "[mock] Hello!"

        return ChatResult(
            success=True,
            data={
                "id": f"chatcmpl-mock-{uuid.uuid4().hex[:24]}",
                "object": "chat.completion",
                "created": int(time.time()),
                "model": self.model,
                "choices": [
                    {
                        "index": 0,
                        "message": {"role": "assistant", "content": reply},
                        "finish_reason": "stop",
                    }
                ],
            },
        )
