"""Planner - turns sanitized intent into a layout + component tree."""

import threading

from pydantic import ValidationError

from uiforge.core import get_logger, extract_json, JSONParseError, MalformedModelOutput
from .base import LLMStep
from .models import Plan
from .prompts import get_planner_prompt


logger = get_logger(__name__)


class Planner(LLMStep):
    """Produces a schema-constrained Plan with one model call."""

    def plan(self, intent: str, cancel: threading.Event | None = None) -> Plan:
        """
        Plan a UI for ``intent``.

        Raises:
            MalformedModelOutput: The response is not a JSON plan with a
                ``layout`` and a ``components`` list
        """
        raw = self._complete(get_planner_prompt(intent), cancel)

        try:
            data = extract_json(raw)
        except JSONParseError as e:
            logger.error("plan_parse_failed", error=str(e), raw_length=len(raw))
            raise MalformedModelOutput(
                f"Planner failed to produce valid JSON: {e}", excerpt=self._excerpt(raw)
            ) from e

        if not data.get("layout") or not isinstance(data.get("components"), list):
            logger.error("plan_invalid_structure", keys=sorted(data))
            raise MalformedModelOutput(
                "Invalid plan structure: missing layout or components", excerpt=self._excerpt(raw)
            )

        try:
            plan = Plan.model_validate(data)
        except ValidationError as e:
            logger.error("plan_schema_failed", errors=e.error_count())
            raise MalformedModelOutput(
                f"Plan does not match the expected schema: {e.errors()[0]['msg']}",
                excerpt=self._excerpt(raw),
            ) from e

        logger.info(
            "planner_complete", layout=plan.layout.type.value, components=len(plan.components)
        )
        return plan
