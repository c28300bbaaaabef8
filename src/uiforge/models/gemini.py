"""Gemini completion provider."""

import time

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from uiforge.core import get_logger, RateLimitedError, UpstreamError
from uiforge.monitoring import metrics_collector
from .base import CompletionProvider, Prompt, as_messages
from .config import CompletionOptions, GeminiConfig


logger = get_logger(__name__)

_RATE_LIMITED = (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests)
_ROLES = {"user": "user", "assistant": "model"}


class GeminiProvider(CompletionProvider):
    """Gemini API wrapper mapping vendor failures onto the provider contract."""

    name = "gemini"

    def __init__(self, config: GeminiConfig) -> None:
        self.config = config
        genai.configure(api_key=config.api_key)
        logger.info("model_loaded", provider=self.name, model=config.model_name)

    def _model(self, options: CompletionOptions, system: str | None) -> genai.GenerativeModel:
        generation_config = genai.GenerationConfig(
            temperature=options.temperature,
            max_output_tokens=options.max_output_tokens,
            top_p=self.config.top_p,
            top_k=self.config.top_k,
        )
        return genai.GenerativeModel(
            model_name=self.config.model_name,
            generation_config=generation_config,
            system_instruction=system,
        )

    def complete(self, prompt: Prompt, options: CompletionOptions | None = None) -> str:
        options = options or CompletionOptions()
        messages = as_messages(prompt)
        system = "\n\n".join(m.content for m in messages if m.role == "system") or None
        contents = [
            {"role": _ROLES[m.role], "parts": [m.content]} for m in messages if m.role != "system"
        ]

        start = time.time()
        try:
            response = self._model(options, system).generate_content(contents)
            text = response.text
        except _RATE_LIMITED as e:
            metrics_collector.record_llm_call(self.name, "rate_limited", time.time() - start)
            raise RateLimitedError(str(e), provider=self.name) from e
        except Exception as e:
            metrics_collector.record_llm_call(self.name, "error", time.time() - start)
            logger.error("invoke_error", provider=self.name, error=str(e))
            raise UpstreamError(f"Gemini request failed: {e}", provider=self.name) from e

        metrics_collector.record_llm_call(self.name, "success", time.time() - start)
        return text
