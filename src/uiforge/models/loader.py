"""Provider loader - resolves the configured completion backend once."""

from uiforge.core import get_logger, ProviderKind, Settings
from .base import CompletionProvider
from .config import GeminiConfig, OpenAICompatConfig


logger = get_logger(__name__)


class ModelLoadError(Exception):
    """Provider could not be constructed."""
    pass


class ModelLoader:
    """Builds the provider selected in settings."""

    @staticmethod
    def load(settings: Settings) -> CompletionProvider:
        """Load provider with config."""
        kind = ProviderKind(settings.provider)
        logger.info("loading", provider=kind.value)
        try:
            if kind is ProviderKind.GEMINI:
                from .gemini import GeminiProvider

                if not settings.gemini_api_key:
                    raise ModelLoadError(
                        "Gemini API key is not set (UIFORGE_GEMINI_API_KEY or GOOGLE_AI_API_KEY)"
                    )
                return GeminiProvider(GeminiConfig.from_settings(settings))

            from .openai_compat import OpenAICompatProvider

            return OpenAICompatProvider(OpenAICompatConfig.from_settings(settings))
        except ModelLoadError:
            raise
        except Exception as e:
            logger.error("load_failed", provider=kind.value, error=str(e))
            raise ModelLoadError(f"Failed to load {kind.value} provider") from e
