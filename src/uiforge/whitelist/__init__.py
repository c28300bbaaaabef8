"""Component whitelist: the registry and the static checker enforcing it."""

from .registry import (
    ALLOWED_CLASSES,
    ALLOWED_COMPONENTS,
    ALLOWED_IMPORTS,
    COMPONENTS,
    ENTRY_POINT,
    component_catalogue,
)
from .checker import CodeValidator, ValidationResult, validate_code

__all__ = [
    "ALLOWED_CLASSES",
    "ALLOWED_COMPONENTS",
    "ALLOWED_IMPORTS",
    "COMPONENTS",
    "ENTRY_POINT",
    "component_catalogue",
    "CodeValidator",
    "ValidationResult",
    "validate_code",
]
