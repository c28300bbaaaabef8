"""Static whitelist enforcement over generated component code.

Pattern-based rather than a real parse: fast, dependency-free, and the only
safety contract the downstream renderer relies on.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, computed_field

from uiforge.core import get_logger
from .registry import (
    ALLOWED_CLASSES,
    ALLOWED_COMPONENTS,
    ALLOWED_IMPORTS,
    CHART_BAR_CLASS,
    EXEMPT_TAGS,
    FRAMEWORK_IMPORT,
    LIBRARY_IMPORT,
)


logger = get_logger(__name__)

_INLINE_STYLE = re.compile(r"style\s*=\s*\{\{")
_COMPONENT_TAG = re.compile(r"<([A-Z][\w$.]*)")
# Statement position only: not a suffix of an identifier or member access.
_IMPORT_FROM = re.compile(
    r"(?<![\w.$])(?:import\s+|export\s*(?=[*{]))[^;'\"]*?\bfrom\s*['\"]([^'\"]+)['\"]"
)
_IMPORT_BARE = re.compile(r"(?<![\w.$])import\s*\(?\s*['\"]([^'\"]+)['\"]")
_CLASS_ATTR = re.compile(r"className=(?:\"([^\"]+)\"|'([^']+)')")

_CHART_BAR_MARKER = f'className="{CHART_BAR_CLASS}"'
# Max characters between the chart-bar class and its style attribute.
_CHART_STYLE_WINDOW = 50

MISSING_EXPORT_ERROR = "Missing default export. Component must have a default export."


class ValidationResult(BaseModel):
    """Errors block ``valid``; warnings are advisory only."""

    model_config = ConfigDict(frozen=True)

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return not self.errors


class CodeValidator:
    """Checks generated code against the component/import/class whitelist."""

    def validate(self, code: str) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        self._check_inline_styles(code, warnings)
        self._check_components(code, errors)
        self._check_imports(code, errors)
        if "export default" not in code:
            errors.append(MISSING_EXPORT_ERROR)
        self._check_class_names(code, warnings)

        result = ValidationResult(errors=errors, warnings=warnings)
        logger.debug("validated", valid=result.valid, errors=len(errors), warnings=len(warnings))
        return result

    @staticmethod
    def _check_inline_styles(code: str, warnings: list[str]) -> None:
        untolerated = 0
        for match in _INLINE_STYLE.finditer(code):
            marker = code.rfind(_CHART_BAR_MARKER, 0, match.start())
            if marker != -1 and match.start() - (marker + len(_CHART_BAR_MARKER)) <= _CHART_STYLE_WINDOW:
                continue
            untolerated += 1
        if untolerated:
            warnings.append(
                f"Found {untolerated} inline style(s). Only Chart bar heights are allowed."
            )

    @staticmethod
    def _check_components(code: str, errors: list[str]) -> None:
        permitted = ", ".join(sorted(ALLOWED_COMPONENTS))
        used = dict.fromkeys(_COMPONENT_TAG.findall(code))
        for tag in used:
            if tag in EXEMPT_TAGS or tag in ALLOWED_COMPONENTS:
                continue
            errors.append(f"Non-whitelisted component used: <{tag}>. Only these are allowed: {permitted}")

    @staticmethod
    def _check_imports(code: str, errors: list[str]) -> None:
        sources = _IMPORT_FROM.findall(code) + _IMPORT_BARE.findall(code)
        for source in dict.fromkeys(sources):
            if source not in ALLOWED_IMPORTS:
                errors.append(
                    f'Non-allowed import: "{source}". '
                    f"Only '{FRAMEWORK_IMPORT}' and '{LIBRARY_IMPORT}' are permitted."
                )

    @staticmethod
    def _check_class_names(code: str, warnings: list[str]) -> None:
        seen: set[str] = set()
        for double, single in _CLASS_ATTR.findall(code):
            for cls in (double or single).split():
                if cls in ALLOWED_CLASSES or cls in seen:
                    continue
                seen.add(cls)
                warnings.append(f'Potentially non-whitelisted class: "{cls}"')


_default_validator = CodeValidator()


def validate_code(code: str) -> ValidationResult:
    """Validate with the default whitelist."""
    return _default_validator.validate(code)
