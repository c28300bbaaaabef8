"""Text-completion provider capability."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pydantic import BaseModel, Field

from .config import CompletionOptions


class Message(BaseModel):
    """One turn of a message-sequence prompt."""

    role: str = Field(..., pattern="^(user|assistant|system)$")
    content: str


Prompt = str | Sequence[Message]


class CompletionProvider(ABC):
    """
    A model that turns a prompt into text.

    Implementations raise ``RateLimitedError`` when the vendor signals
    "too many requests" and ``UpstreamError`` for every other failure, so
    swapping vendors never changes pipeline behaviour.
    """

    name: str = "provider"

    @abstractmethod
    def complete(self, prompt: Prompt, options: CompletionOptions | None = None) -> str:
        """Return the full completion text for ``prompt``."""

    def close(self) -> None:
        """Release network resources. No-op by default."""


def as_messages(prompt: Prompt) -> list[Message]:
    """Normalize a prompt to a message list."""
    if isinstance(prompt, str):
        return [Message(role="user", content=prompt)]
    return list(prompt)
