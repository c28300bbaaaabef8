"""
Models package - text-completion providers.
One capability, selectable vendor implementations.
"""

from .base import CompletionProvider, Message, Prompt, as_messages
from .config import CompletionOptions, GeminiConfig, OpenAICompatConfig
from .loader import ModelLoader, ModelLoadError

__all__ = [
    "CompletionProvider",
    "CompletionOptions",
    "Message",
    "Prompt",
    "as_messages",
    "GeminiConfig",
    "OpenAICompatConfig",
    "ModelLoader",
    "ModelLoadError",
]
