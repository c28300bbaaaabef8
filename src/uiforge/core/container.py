"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from uiforge.core.config import Settings, get_settings
from uiforge.core.validate import PromptSanitizer
from uiforge.models import CompletionOptions, CompletionProvider, ModelLoader
from uiforge.agents import CodeGenerator, Explainer, Planner, ResilientInvoker
from uiforge.storage import VersionStore
from uiforge.whitelist import CodeValidator
from uiforge.handlers import AgentHandler


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_completion_provider(self) -> CompletionProvider:
        """Provide the configured model backend."""
        return ModelLoader.load(self.settings)

    @singleton
    @provider
    def provide_invoker(self) -> ResilientInvoker:
        return ResilientInvoker(
            max_attempts=self.settings.max_attempts,
            backoff_base=self.settings.backoff_base_seconds,
        )

    @singleton
    @provider
    def provide_completion_options(self) -> CompletionOptions:
        return CompletionOptions(
            temperature=self.settings.temperature,
            max_output_tokens=self.settings.max_output_tokens,
        )

    @singleton
    @provider
    def provide_version_store(self) -> VersionStore:
        """Provide the process-wide version history."""
        return VersionStore()

    @singleton
    @provider
    def provide_sanitizer(self) -> PromptSanitizer:
        return PromptSanitizer(max_length=self.settings.max_prompt_length)

    @singleton
    @provider
    def provide_validator(self) -> CodeValidator:
        return CodeValidator()

    @singleton
    @provider
    def provide_planner(
        self, llm: CompletionProvider, invoker: ResilientInvoker, options: CompletionOptions
    ) -> Planner:
        return Planner(llm, invoker, options, excerpt_length=self.settings.excerpt_length)

    @singleton
    @provider
    def provide_generator(
        self, llm: CompletionProvider, invoker: ResilientInvoker, options: CompletionOptions
    ) -> CodeGenerator:
        return CodeGenerator(llm, invoker, options, excerpt_length=self.settings.excerpt_length)

    @singleton
    @provider
    def provide_explainer(
        self, llm: CompletionProvider, invoker: ResilientInvoker, options: CompletionOptions
    ) -> Explainer:
        return Explainer(llm, invoker, options, excerpt_length=self.settings.excerpt_length)

    @singleton
    @provider
    def provide_agent_handler(
        self,
        sanitizer: PromptSanitizer,
        planner: Planner,
        generator: CodeGenerator,
        validator: CodeValidator,
        explainer: Explainer,
        store: VersionStore,
    ) -> AgentHandler:
        """Provide the pipeline handler with all stages wired."""
        return AgentHandler(
            sanitizer=sanitizer,
            planner=planner,
            generator=generator,
            validator=validator,
            explainer=explainer,
            store=store,
        )


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings or get_settings())])
