"""Conversation history for multi-turn requests."""

from typing import Iterator, Literal

from pydantic import BaseModel, ConfigDict, Field

from gemini_sdk.exceptions import GeminiValidationError
from gemini_sdk.models.content import Content, TextContent, content_to_parts
from gemini_sdk.models.request import WireContent
from gemini_sdk.models.response import GeminiResponse


class ConversationMessage(BaseModel):
    """A single turn: who spoke and what they sent."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "model"] = Field(..., description="Role of the sender")
    parts: tuple[Content, ...] = Field(..., description="Content of the turn")

    @classmethod
    def user(cls, text: str) -> "ConversationMessage":
        return cls(role="user", parts=(TextContent(text=text),))

    @classmethod
    def user_with_content(cls, contents: list[Content]) -> "ConversationMessage":
        return cls(role="user", parts=tuple(contents))

    @classmethod
    def model(cls, content: Content) -> "ConversationMessage":
        return cls(role="model", parts=(content,))

    @classmethod
    def from_response(cls, response: GeminiResponse) -> "ConversationMessage":
        """Model turn holding the response's primary (first candidate) content."""
        if not response.candidates:
            return cls.model(TextContent.truncated())
        return cls.model(response.candidates[0].content)

    def to_wire(self) -> WireContent:
        parts = [part for content in self.parts for part in content_to_parts(content)]
        return WireContent(role=self.role, parts=parts)


class ConversationContext:
    """Ordered, append-only history of a conversation.

    Order is significant to the model and is preserved exactly. There is no
    locking: callers must finish one request before starting the next one
    on the same context.
    """

    def __init__(self):
        self._history: list[ConversationMessage] = []

    @property
    def history(self) -> tuple[ConversationMessage, ...]:
        return tuple(self._history)

    @property
    def is_empty(self) -> bool:
        return not self._history

    def __len__(self) -> int:
        return len(self._history)

    def __iter__(self) -> Iterator[ConversationMessage]:
        return iter(tuple(self._history))

    def add_user_message(self, text: str) -> None:
        """Append a text turn from the user."""
        self.add_message(ConversationMessage.user(text))

    def add_user_content(self, contents: list[Content]) -> None:
        """Append a user turn made of several content items."""
        if not contents:
            raise GeminiValidationError(
                "Contents cannot be empty",
                {"contents": "At least one content item is required"},
            )
        self.add_message(ConversationMessage.user_with_content(contents))

    def add_model_response(self, response: GeminiResponse) -> None:
        """Append the model's reply, reduced to its primary content."""
        self.add_message(ConversationMessage.from_response(response))

    def add_model_content(self, content: Content) -> None:
        self.add_message(ConversationMessage.model(content))

    def add_message(self, message: ConversationMessage) -> None:
        self._history.append(message)

    @property
    def last_user_message(self) -> ConversationMessage | None:
        return self._last_with_role("user")

    @property
    def last_model_message(self) -> ConversationMessage | None:
        return self._last_with_role("model")

    def _last_with_role(self, role: str) -> ConversationMessage | None:
        for message in reversed(self._history):
            if message.role == role:
                return message
        return None

    def to_wire_contents(self) -> list[WireContent]:
        return [message.to_wire() for message in self._history]

    def to_wire(self) -> list[dict]:
        """History in request format: ``[{"role": ..., "parts": [...]}, ...]``."""
        return [
            content.model_dump(exclude_none=True) for content in self.to_wire_contents()
        ]

    def copy(self) -> "ConversationContext":
        clone = ConversationContext()
        clone._history.extend(self._history)
        return clone

    def __repr__(self) -> str:
        return f"ConversationContext(messages={len(self._history)})"
