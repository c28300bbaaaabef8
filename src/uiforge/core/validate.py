"""Input validation: prompt sanitation and transport request models."""

import re
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


MAX_PROMPT_LENGTH = 5000
MAX_ID_LENGTH = 128

BLOCKED_REASON = "Input contains potentially harmful pattern. Please rephrase your UI request."
EMPTY_REASON = "Empty or invalid input"

# Checked in order against the truncated prompt; first match blocks.
INJECTION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"ignore\s+(all\s+)?previous\s+instructions",
        r"ignore\s+the\s+above",
        r"disregard\s+(all\s+)?previous",
        r"system\s*:\s*",
        r"\[INST\]",
        r"\[/INST\]",
        r"<\|im_start\|>",
        r"<\|im_end\|>",
        r"you\s+are\s+now\s+",
        r"pretend\s+you\s+are",
        r"act\s+as\s+if",
        r"new\s+instructions\s*:",
        r"override\s+(all\s+)?rules",
        r"forget\s+(all\s+)?(your\s+)?instructions",
    )
)

_SCRIPT_BLOCK = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]+>")


@dataclass(frozen=True)
class SanitizationResult:
    """Outcome of sanitizing one prompt."""

    sanitized_text: str
    blocked: bool
    reason: str | None = None


class PromptSanitizer:
    """Filters and bounds raw user text before it reaches any model."""

    def __init__(
        self,
        max_length: int = MAX_PROMPT_LENGTH,
        patterns: tuple[re.Pattern[str], ...] = INJECTION_PATTERNS,
    ) -> None:
        self.max_length = max_length
        self.patterns = patterns

    def sanitize(self, raw: Any) -> SanitizationResult:
        """
        Sanitize a raw prompt.

        Fails closed: any injection pattern blocks the whole prompt, nothing
        is partially redacted.

        Args:
            raw: Untrusted user input

        Returns:
            SanitizationResult with the cleaned text, or blocked with a reason
        """
        if not isinstance(raw, str) or not raw.strip():
            return SanitizationResult(sanitized_text="", blocked=True, reason=EMPTY_REASON)

        text = raw.strip()[: self.max_length]

        for pattern in self.patterns:
            if pattern.search(text):
                return SanitizationResult(sanitized_text="", blocked=True, reason=BLOCKED_REASON)

        text = _SCRIPT_BLOCK.sub("", text)
        text = _ANY_TAG.sub("", text)
        if not text.strip():
            return SanitizationResult(sanitized_text="", blocked=True, reason=EMPTY_REASON)
        return SanitizationResult(sanitized_text=text, blocked=False)


_default_sanitizer = PromptSanitizer()


def sanitize(raw: Any) -> SanitizationResult:
    """Sanitize with the default limits."""
    return _default_sanitizer.sanitize(raw)


# ============================================================================
# Transport request models
# ============================================================================


class RequestValidator(BaseModel):
    """Base validator: unknown fields rejected, string fields strict."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class SessionRequest(RequestValidator):
    """Request addressed to one editor session."""

    session_id: str = Field(alias="sessionId", strict=True, min_length=1, max_length=MAX_ID_LENGTH)

    @field_validator("session_id")
    @classmethod
    def validate_session_id(cls, v: str) -> str:
        """Ensure session id is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("sessionId cannot be empty")
        return stripped


class PromptRequest(SessionRequest):
    """Generate or modify request. The prompt is sanitized downstream."""

    prompt: str = Field(strict=True, min_length=1)


class RollbackRequest(SessionRequest):
    """Rollback request."""

    version_id: str = Field(alias="versionId", strict=True, min_length=1, max_length=MAX_ID_LENGTH)
