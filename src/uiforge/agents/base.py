"""Shared plumbing for pipeline steps that call the model."""

import threading

from uiforge.models import CompletionOptions, CompletionProvider, Prompt
from .invoker import ResilientInvoker


class LLMStep:
    """A pipeline step that issues provider calls through the invoker."""

    def __init__(
        self,
        provider: CompletionProvider,
        invoker: ResilientInvoker,
        options: CompletionOptions | None = None,
        excerpt_length: int = 500,
    ) -> None:
        self.provider = provider
        self.invoker = invoker
        self.options = options or CompletionOptions()
        self.excerpt_length = excerpt_length

    def _complete(self, prompt: Prompt, cancel: threading.Event | None = None) -> str:
        return self.invoker.invoke(lambda: self.provider.complete(prompt, self.options), cancel=cancel)

    def _excerpt(self, raw: str) -> str:
        return raw[: self.excerpt_length]
