"""Pipeline error taxonomy.

Every failure that ends a pipeline run derives from ``PipelineError`` so the
transport layer can map it to a single descriptive reason. Whitelist
violations are not exceptions; they travel as ``ValidationResult`` data.
"""


class PipelineError(Exception):
    """Base class for failures that abort a pipeline run."""

    status_code = 500


class InputRejected(PipelineError):
    """The sanitizer blocked the prompt (empty input or injection pattern)."""

    status_code = 400


class NotFound(PipelineError):
    """A session or version referenced by the caller does not exist."""

    status_code = 404


class UpstreamError(PipelineError):
    """Non-transient provider failure. Never retried."""

    status_code = 502

    def __init__(self, message: str, provider: str = "unknown") -> None:
        super().__init__(message)
        self.provider = provider


class RateLimitedError(UpstreamError):
    """Provider signalled "too many requests". Retried by the invoker."""

    status_code = 429


class UpstreamExhausted(PipelineError):
    """Rate limiting persisted through the whole attempt budget."""

    status_code = 503

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class MalformedModelOutput(PipelineError):
    """Model output could not be parsed or repaired into the required shape."""

    status_code = 502

    def __init__(self, message: str, excerpt: str = "") -> None:
        super().__init__(f"{message}\nRaw output: {excerpt}" if excerpt else message)
        self.excerpt = excerpt


class OperationCancelled(PipelineError):
    """The caller withdrew the run while the invoker was waiting."""

    status_code = 499


__all__ = [
    "PipelineError",
    "InputRejected",
    "NotFound",
    "UpstreamError",
    "RateLimitedError",
    "UpstreamExhausted",
    "MalformedModelOutput",
    "OperationCancelled",
]
