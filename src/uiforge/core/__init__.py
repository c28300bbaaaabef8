"""Core utilities and infrastructure."""

from .config import ProviderKind, Settings, get_settings
from .logging_config import configure_logging, get_logger, LogContext
from .errors import (
    PipelineError,
    InputRejected,
    NotFound,
    UpstreamError,
    RateLimitedError,
    UpstreamExhausted,
    MalformedModelOutput,
    OperationCancelled,
)
from .validate import (
    PromptSanitizer,
    SanitizationResult,
    sanitize,
    PromptRequest,
    RollbackRequest,
    SessionRequest,
)
from .json import extract_json, safe_json_dumps, strip_code_fence, JSONParseError
from .tracing import init_tracer, trace_operation


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "ProviderKind",
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # Errors
    "PipelineError",
    "InputRejected",
    "NotFound",
    "UpstreamError",
    "RateLimitedError",
    "UpstreamExhausted",
    "MalformedModelOutput",
    "OperationCancelled",
    # Validation
    "PromptSanitizer",
    "SanitizationResult",
    "sanitize",
    "PromptRequest",
    "RollbackRequest",
    "SessionRequest",
    # JSON
    "extract_json",
    "safe_json_dumps",
    "strip_code_fence",
    "JSONParseError",
    # Tracing
    "init_tracer",
    "trace_operation",
    # DI
    "create_container",
]
