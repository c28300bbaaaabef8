"""Agent Handler - the five caller-facing pipeline operations."""

import threading
import time
from collections.abc import Callable
from typing import TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from uiforge.core import (
    get_logger,
    LogContext,
    InputRejected,
    NotFound,
    PipelineError,
    PromptSanitizer,
)
from uiforge.core.id import new_request_id
from uiforge.agents import CodeGenerator, Explainer, Planner, PlanSummary
from uiforge.monitoring import metrics_collector, trace_operation
from uiforge.storage import Version, VersionStore, VersionSummary, VersionType
from uiforge.whitelist import CodeValidator, ValidationResult


logger = get_logger(__name__)

T = TypeVar("T")


class _Bundle(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class GenerateResult(_Bundle):
    """Outcome of generate/regenerate."""

    version: Version
    validation: ValidationResult
    plan_summary: PlanSummary
    code_length: int
    explanation: str


class ModifyResult(_Bundle):
    """Outcome of an incremental edit."""

    version: Version
    validation: ValidationResult
    original_length: int
    new_length: int
    explanation: str


class AgentHandler:
    """
    Runs the pipeline for one request at a time per call.

    Stages run strictly in sequence. A version is appended only after the
    run has passed validation and explanation, so a failing run never leaves
    a partial entry behind. Validation errors do not block storing.
    """

    def __init__(
        self,
        sanitizer: PromptSanitizer,
        planner: Planner,
        generator: CodeGenerator,
        validator: CodeValidator,
        explainer: Explainer,
        store: VersionStore,
    ) -> None:
        self.sanitizer = sanitizer
        self.planner = planner
        self.generator = generator
        self.validator = validator
        self.explainer = explainer
        self.store = store

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def generate(
        self, prompt: str, session_id: str, cancel: threading.Event | None = None
    ) -> GenerateResult:
        """Fresh build: sanitize, plan, generate, validate, explain, store."""
        return self._run(
            "generate", session_id, lambda: self._build(self._sanitize(prompt), session_id, cancel)
        )

    def modify(
        self, prompt: str, session_id: str, cancel: threading.Event | None = None
    ) -> ModifyResult:
        """Incremental edit of the session's latest code. Skips the planner."""
        return self._run("modify", session_id, lambda: self._modify(prompt, session_id, cancel))

    def regenerate(self, session_id: str, cancel: threading.Event | None = None) -> GenerateResult:
        """Re-run a fresh build from the session's last user-entered prompt."""

        def run() -> GenerateResult:
            prompt = self._last_user_prompt(session_id)
            if prompt is None:
                raise NotFound("No existing UI to regenerate.")
            return self._build(prompt, session_id, cancel)

        return self._run("regenerate", session_id, run)

    def get_versions(self, session_id: str) -> list[VersionSummary]:
        return [VersionSummary.of(v) for v in self.store.get_versions(session_id)]

    def rollback(self, session_id: str, version_id: str) -> Version:
        version = self.store.rollback_to(session_id, version_id)
        if version is None:
            raise NotFound("Version not found")
        return version

    def clear_session(self, session_id: str) -> None:
        self.store.clear_session(session_id)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _sanitize(self, prompt: str) -> str:
        result = self.sanitizer.sanitize(prompt)
        if result.blocked:
            logger.warning("input_rejected", reason=result.reason)
            raise InputRejected(result.reason or "Input rejected")
        return result.sanitized_text

    def _build(self, intent: str, session_id: str, cancel: threading.Event | None) -> GenerateResult:
        with trace_operation("planner"):
            plan = self.planner.plan(intent, cancel=cancel)
        with trace_operation("generator"):
            code = self.generator.generate(plan, cancel=cancel)
        validation = self._validate(code)
        with trace_operation("explainer"):
            explanation = self.explainer.explain(intent, plan, code, cancel=cancel)

        version = self.store.add_version(
            session_id, code, plan, explanation, intent, VersionType.GENERATE
        )
        return GenerateResult(
            version=version,
            validation=validation,
            plan_summary=PlanSummary.of(plan),
            code_length=len(code),
            explanation=explanation,
        )

    def _modify(self, prompt: str, session_id: str, cancel: threading.Event | None) -> ModifyResult:
        request = self._sanitize(prompt)

        # Held across read-modify-append so edits to one session chain in order.
        with self.store.lock(session_id):
            latest = self.store.get_latest_version(session_id)
            if latest is None:
                raise NotFound("No existing UI to modify. Use generate first.")

            with trace_operation("modifier"):
                code = self.generator.modify(latest.code, request, cancel=cancel)
            validation = self._validate(code)
            with trace_operation("explainer"):
                explanation = self.explainer.explain_modification(
                    latest.code, code, request, cancel=cancel
                )

            version = self.store.add_version(
                session_id, code, latest.plan, explanation, request, VersionType.MODIFY
            )

        return ModifyResult(
            version=version,
            validation=validation,
            original_length=len(latest.code),
            new_length=len(code),
            explanation=explanation,
        )

    def _validate(self, code: str) -> ValidationResult:
        validation = self.validator.validate(code)
        metrics_collector.record_validation(validation.valid)
        logger.info(
            "validator_complete",
            valid=validation.valid,
            errors=len(validation.errors),
            warnings=len(validation.warnings),
        )
        return validation

    def _last_user_prompt(self, session_id: str) -> str | None:
        # Rollback entries carry a synthetic prompt.
        for version in reversed(self.store.get_versions(session_id)):
            if version.type is not VersionType.ROLLBACK:
                return version.user_prompt
        return None

    def _run(self, operation: str, session_id: str, fn: Callable[[], T]) -> T:
        start_time = time.time()
        with LogContext(session_id=session_id, request_id=new_request_id()):
            logger.info("pipeline_start", operation=operation)
            try:
                with trace_operation(operation, session_id=session_id):
                    result = fn()
            except PipelineError as e:
                duration = time.time() - start_time
                metrics_collector.record_pipeline_run(operation, type(e).__name__, duration)
                metrics_collector.record_error(type(e).__name__, operation)
                logger.error("pipeline_failed", operation=operation, error=str(e))
                raise
            except Exception as e:
                duration = time.time() - start_time
                metrics_collector.record_pipeline_run(operation, "error", duration)
                metrics_collector.record_error("unexpected", operation)
                logger.error("pipeline_failed", operation=operation, error=str(e), exc_info=True)
                raise

            duration = time.time() - start_time
            metrics_collector.record_pipeline_run(operation, "success", duration)
            logger.info("pipeline_complete", operation=operation, duration_ms=round(duration * 1000, 2))
            return result
