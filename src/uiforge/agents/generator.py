"""Generator / Modifier - plan (or existing code + request) to component code."""

import re
import threading

from uiforge.core import get_logger, safe_json_dumps, strip_code_fence, MalformedModelOutput
from uiforge.whitelist import ENTRY_POINT
from .base import LLMStep
from .models import Plan
from .prompts import get_generator_prompt, get_modifier_prompt


logger = get_logger(__name__)

_ENTRY_DEFINITION = re.compile(
    rf"\bfunction\s+{ENTRY_POINT}\s*\(|\b(?:const|let|var)\s+{ENTRY_POINT}\s*="
)


def ensure_default_export(code: str, step: str = "Generator", excerpt_length: int = 500) -> str:
    """
    Guarantee ``code`` default-exports its entry point.

    Appends the export when only the entry-point definition is present.

    Raises:
        MalformedModelOutput: Neither an export nor the entry point exists
    """
    if "export default" in code:
        return code
    if _ENTRY_DEFINITION.search(code):
        logger.info("export_repaired", step=step)
        return f"{code}\nexport default {ENTRY_POINT};"
    raise MalformedModelOutput(
        f"{step} produced code without a default export", excerpt=code[:excerpt_length]
    )


class CodeGenerator(LLMStep):
    """Writes whole component files; modification replaces the artifact wholesale."""

    def generate(self, plan: Plan, cancel: threading.Event | None = None) -> str:
        plan_json = safe_json_dumps(plan.model_dump(mode="json"), indent=2)
        raw = self._complete(get_generator_prompt(plan_json), cancel)
        code = ensure_default_export(strip_code_fence(raw), "Generator", self.excerpt_length)
        logger.info("generator_complete", code_length=len(code))
        return code

    def modify(
        self, existing_code: str, change_request: str, cancel: threading.Event | None = None
    ) -> str:
        raw = self._complete(get_modifier_prompt(existing_code, change_request), cancel)
        code = ensure_default_export(strip_code_fence(raw), "Modifier", self.excerpt_length)
        logger.info(
            "modifier_complete", original_length=len(existing_code), new_length=len(code)
        )
        return code
