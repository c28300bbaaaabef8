"""The closed component library generated code may use.

The catalogue is both shown to the model (inside every instruction prompt)
and enforced on its output by ``CodeValidator``.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ComponentSpec:
    """One registered component and its documented props."""

    name: str
    props: str


COMPONENTS: tuple[ComponentSpec, ...] = (
    ComponentSpec(
        "Button",
        'variant("primary"|"secondary"|"danger"|"outline"), size("sm"|"md"|"lg"), '
        "children(required), onClick, disabled",
    ),
    ComponentSpec("Card", "title, subtitle, children, footer"),
    ComponentSpec(
        "Input",
        'label, placeholder, type("text"|"email"|"password"|"number"|"search"), value, '
        "onChange, disabled, multiline(boolean), rows",
    ),
    ComponentSpec("Table", "columns(array of {key,header})(required), data(array of row objects)(required)"),
    ComponentSpec("Modal", "title(required), isOpen(required), onClose(required), children, footer"),
    ComponentSpec("Sidebar", "brand, items(array of {id,label,icon?})(required), activeItem, onSelect"),
    ComponentSpec("Navbar", "brand(required), links(array of {label,href?,active?}), actions"),
    ComponentSpec("Chart", 'type("bar"), data(array of {label,value,color?})(required), title'),
)

ALLOWED_COMPONENTS: frozenset[str] = frozenset(c.name for c in COMPONENTS)

# Capitalized tags that are framework built-ins rather than components.
EXEMPT_TAGS: frozenset[str] = frozenset({"React.Fragment", "Fragment"})

FRAMEWORK_IMPORT = "react"
LIBRARY_IMPORT = "./components/ui"
ALLOWED_IMPORTS: frozenset[str] = frozenset({FRAMEWORK_IMPORT, LIBRARY_IMPORT})

ALLOWED_HTML_ELEMENTS: tuple[str, ...] = (
    "div", "span", "h1", "h2", "h3", "h4", "h5", "h6", "p", "br", "hr",
    "img", "a", "ul", "ol", "li", "strong", "em",
)

# Grouped the way they are presented to the model.
LAYOUT_CLASS_GROUPS: tuple[tuple[str, ...], ...] = (
    ("ui-layout-flex", "ui-layout-flex-col", "ui-layout-grid-2", "ui-layout-grid-3", "ui-layout-grid-4"),
    ("ui-layout-center", "ui-layout-between"),
    ("ui-gap-sm", "ui-gap-md", "ui-gap-lg", "ui-gap-xl"),
    ("ui-p-sm", "ui-p-md", "ui-p-lg", "ui-p-xl"),
    ("ui-mt-sm", "ui-mt-md", "ui-mt-lg"),
    ("ui-w-full", "ui-flex-1"),
    ("ui-text-center", "ui-text-sm", "ui-text-lg", "ui-text-xl", "ui-font-bold", "ui-font-medium"),
    ("ui-heading", "ui-text-muted", "ui-container"),
    ("ui-badge", "ui-badge--primary", "ui-badge--success", "ui-badge--danger", "ui-badge--warning"),
)

ALLOWED_CLASSES: frozenset[str] = frozenset(cls for group in LAYOUT_CLASS_GROUPS for cls in group)

# The one element allowed to carry an inline style (dynamic bar heights).
CHART_BAR_CLASS = "ui-chart__bar"

ENTRY_POINT = "GeneratedUI"


def component_catalogue() -> str:
    """Render the component library and class list for instruction prompts."""
    lines = ["You have access to the following FIXED component library. You MUST ONLY use these components:", ""]
    for i, spec in enumerate(COMPONENTS, start=1):
        lines.append(f"{i}. {spec.name} - props: {spec.props}")
    lines.append("")
    lines.append("Layout utility classes available (use on wrapper divs):")
    for group in LAYOUT_CLASS_GROUPS:
        lines.append("- " + ", ".join(group))
    lines.extend([
        "",
        "STRICT RULES:",
        "- DO NOT create new components",
        "- DO NOT use inline styles",
        "- DO NOT use arbitrary CSS classes not listed above",
        "- DO NOT import external libraries",
        "- Only use className with the utility classes listed above on wrapper divs",
        "- All components are imported from the library (already available)",
    ])
    return "\n".join(lines)
