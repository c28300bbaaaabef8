"""OpenAI-compatible chat completions provider over HTTP."""

import time

import httpx
import pybreaker

from uiforge.core import get_logger, RateLimitedError, UpstreamError
from uiforge.monitoring import metrics_collector
from .base import CompletionProvider, Prompt, as_messages
from .config import CompletionOptions, OpenAICompatConfig


logger = get_logger(__name__)


class BreakerListener(pybreaker.CircuitBreakerListener):
    """Logs circuit breaker state changes."""

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "breaker_state_change",
            breaker=cb.name,
            from_state=str(old_state),
            to_state=str(new_state),
        )


class OpenAICompatProvider(CompletionProvider):
    """
    Chat completions client with circuit breaker protection.

    Rate-limit responses do not count as breaker failures; the invoker
    retries those with backoff instead.
    """

    name = "openai"

    def __init__(self, config: OpenAICompatConfig, client: httpx.Client | None = None) -> None:
        self.config = config
        self.url = f"{config.base_url.rstrip('/')}/chat/completions"
        self._client = client or httpx.Client(timeout=config.timeout)
        self._breaker = pybreaker.CircuitBreaker(
            fail_max=config.fail_max,
            reset_timeout=config.reset_timeout,
            exclude=[RateLimitedError],
            name="completion-http",
            listeners=[BreakerListener()],
        )
        logger.info("client_init", provider=self.name, url=self.url, model=config.model_name)

    def complete(self, prompt: Prompt, options: CompletionOptions | None = None) -> str:
        options = options or CompletionOptions()
        body = {
            "model": self.config.model_name,
            "messages": [m.model_dump() for m in as_messages(prompt)],
            "temperature": options.temperature,
            "max_tokens": options.max_output_tokens,
        }

        start = time.time()
        try:
            text = self._breaker.call(self._post, body)
        except RateLimitedError:
            metrics_collector.record_llm_call(self.name, "rate_limited", time.time() - start)
            raise
        except pybreaker.CircuitBreakerError as e:
            metrics_collector.record_llm_call(self.name, "circuit_open", time.time() - start)
            raise UpstreamError("Circuit breaker open - provider unavailable", provider=self.name) from e
        except UpstreamError:
            metrics_collector.record_llm_call(self.name, "error", time.time() - start)
            raise

        metrics_collector.record_llm_call(self.name, "success", time.time() - start)
        return text

    def _post(self, body: dict) -> str:
        headers = {"Authorization": f"Bearer {self.config.api_key}"} if self.config.api_key else {}
        try:
            response = self._client.post(self.url, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("http_error", provider=self.name, error=str(e))
            raise UpstreamError(f"Request to {self.url} failed: {e}", provider=self.name) from e

        if response.status_code == 429:
            raise RateLimitedError(
                f"Rate limited (retry-after={response.headers.get('retry-after', 'n/a')})",
                provider=self.name,
            )
        if response.status_code >= 400:
            raise UpstreamError(
                f"HTTP {response.status_code}: {response.text[:400]}", provider=self.name
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise UpstreamError(f"Unexpected response shape: {e}", provider=self.name) from e
        if not isinstance(content, str):
            raise UpstreamError("Completion content is not text", provider=self.name)
        return content

    def close(self) -> None:
        self._client.close()
