"""Explainer - natural-language rationale for generated and modified UIs."""

import threading

from uiforge.core import safe_json_dumps
from .base import LLMStep
from .models import Plan
from .prompts import get_explainer_prompt, get_modification_explainer_prompt


class Explainer(LLMStep):
    """Free-form explanations; output is trimmed but otherwise unchecked."""

    def explain(
        self, request: str, plan: Plan, code: str, cancel: threading.Event | None = None
    ) -> str:
        plan_json = safe_json_dumps(plan.model_dump(mode="json"), indent=2)
        return self._complete(get_explainer_prompt(request, plan_json, code), cancel).strip()

    def explain_modification(
        self, old_code: str, new_code: str, request: str, cancel: threading.Event | None = None
    ) -> str:
        prompt = get_modification_explainer_prompt(old_code, new_code, request)
        return self._complete(prompt, cancel).strip()
