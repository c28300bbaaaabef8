"""Plan Data Models."""

from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LayoutType(str, Enum):
    """Top-level arrangement of a planned UI."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    GRID_2 = "grid-2"
    GRID_3 = "grid-3"
    GRID_4 = "grid-4"
    SIDEBAR_MAIN = "sidebar-main"
    NAVBAR_CONTENT = "navbar-content"


class LayoutSpec(BaseModel):
    """Layout choice with a short description."""

    model_config = ConfigDict(frozen=True)

    type: LayoutType
    description: str = ""


class ComponentPlan(BaseModel):
    """One planned component. Names are checked on the generated code, not here."""

    model_config = ConfigDict(frozen=True)

    component: str = Field(..., min_length=1)
    props: dict[str, Any] = Field(default_factory=dict)
    wrapper: str | None = Field(default=None, description="Utility class for a wrapper div")
    children: list["ComponentPlan"] = Field(default_factory=list)


class Plan(BaseModel):
    """Structured intermediate representation produced before code generation."""

    model_config = ConfigDict(frozen=True)

    layout: LayoutSpec
    components: list[ComponentPlan]
    reasoning: str = ""


class PlanSummary(BaseModel):
    """Planner step metadata returned to callers."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    layout: LayoutSpec
    component_count: int
    reasoning: str

    @classmethod
    def of(cls, plan: Plan) -> "PlanSummary":
        return cls(layout=plan.layout, component_count=len(plan.components), reasoning=plan.reasoning)


ComponentPlan.model_rebuild()
