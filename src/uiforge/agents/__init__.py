"""Pipeline steps that talk to the model."""

from .invoker import ResilientInvoker
from .models import ComponentPlan, LayoutSpec, LayoutType, Plan, PlanSummary
from .planner import Planner
from .generator import CodeGenerator, ensure_default_export
from .explainer import Explainer

__all__ = [
    "ResilientInvoker",
    "ComponentPlan",
    "LayoutSpec",
    "LayoutType",
    "Plan",
    "PlanSummary",
    "Planner",
    "CodeGenerator",
    "ensure_default_export",
    "Explainer",
]
