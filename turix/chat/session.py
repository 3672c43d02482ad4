"""Placeholder chat session.

The chat surface is meant to drive the external agent process; until that
bridge exists, replies come from a responder that explains the situation.
"""

import asyncio
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

PLACEHOLDER_DELAY_SECONDS = 1.5

EXAMPLE_TASKS = [
    "Open Safari and search for today's weather",
    "Create a new note with my shopping list",
    "Summarize the document open in Preview",
]

Responder = Callable[[str], Awaitable[str]]


@dataclass
class ChatMessage:
    content: str
    is_user: bool
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def time_label(self) -> str:
        return self.timestamp.strftime("%H:%M")


async def placeholder_responder(text: str, delay: float = PLACEHOLDER_DELAY_SECONDS) -> str:
    await asyncio.sleep(delay)
    return (
        f"I understand you want me to: {text}\n\n"
        "This is a demo interface. To fully execute tasks, the Python agent backend "
        "needs to be running. Please refer to the documentation for connecting the "
        "GUI to the agent."
    )


class ChatSession:
    """In-memory conversation with at most one pending reply."""

    def __init__(self, responder: Responder | None = None):
        self.responder = responder or placeholder_responder
        self.messages: list[ChatMessage] = []
        self.is_processing = False

    def can_send(self, text: str) -> bool:
        return bool(text.strip()) and not self.is_processing

    async def send(self, text: str) -> ChatMessage | None:
        """Append the user's message and await the reply. Ignored when empty or busy."""
        if not self.can_send(text):
            return None
        user_message = ChatMessage(content=text, is_user=True)
        self.messages.append(user_message)
        self.is_processing = True
        try:
            reply_text = await self.responder(user_message.content)
        finally:
            self.is_processing = False
        reply = ChatMessage(content=reply_text, is_user=False)
        self.messages.append(reply)
        logger.debug(f"Chat reply appended ({len(self.messages)} messages)")
        return reply
