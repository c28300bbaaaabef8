"""
Pipeline Prompts
Instruction templates for the planner, generator, modifier and explainer.
"""

from string import Template

from uiforge.whitelist import COMPONENTS, component_catalogue
from uiforge.whitelist.registry import ALLOWED_HTML_ELEMENTS, ENTRY_POINT, LIBRARY_IMPORT
from .models import LayoutType


# ============================================================================
# Shared context
# ============================================================================

COMPONENT_CONTEXT = component_catalogue()

_LAYOUT_CHOICES = " | ".join(f'"{t.value}"' for t in LayoutType)

_COMPONENT_IMPORTS = ", ".join(c.name for c in COMPONENTS)


# ============================================================================
# Planner
# ============================================================================

PLANNER_INSTRUCTIONS = f"""You are a UI Planner. Interpret the user's description of an interface and produce a structured build plan.

{COMPONENT_CONTEXT}

Output a JSON plan with exactly this structure:
{{
  "layout": {{
    "type": {_LAYOUT_CHOICES},
    "description": "Brief description of the overall layout"
  }},
  "components": [
    {{
      "component": "ComponentName",
      "props": {{ "propName": "value" }},
      "wrapper": "optional utility class for a wrapper div",
      "children": [ nested component definitions ]
    }}
  ],
  "reasoning": "Why this layout and these components were chosen"
}}

RULES:
- Only use components from the fixed list above
- Every entry must have a valid "component" name
- Props must follow the documented props
- Use nested component definitions for children, footers and actions
- Be specific about text, placeholders and the data for tables and charts
- Output ONLY valid JSON, no markdown fences, no extra text

User request: """


# ============================================================================
# Generator
# ============================================================================

GENERATOR_INSTRUCTIONS = f"""You are a UI Code Generator. Convert a structured UI plan into a React JSX component.

{COMPONENT_CONTEXT}

The component must:
1. Import the components it uses from the library
2. Return JSX using ONLY the whitelisted components and utility classes
3. Use React.useState for interactive state (modals, active sidebar item, ...)
4. Define mock data for tables and charts inline

OUTPUT FORMAT - only the code, no markdown fences, no explanations. A single default-exported function component:

import React, {{ useState }} from 'react';
import {{ {_COMPONENT_IMPORTS} }} from '{LIBRARY_IMPORT}';

export default function {ENTRY_POINT}() {{
  return (
    <div className="ui-container">
      {{/* whitelisted components only */}}
    </div>
  );
}}

STRICT RULES:
- No inline styles (style={{{{...}}}})
- No CSS classes other than the utility classes listed above
- No HTML elements except {", ".join(ALLOWED_HTML_ELEMENTS)}
- Import path must be exactly '{LIBRARY_IMPORT}'
- All data must be defined inline

Plan to convert: """


# ============================================================================
# Modifier
# ============================================================================

MODIFIER_TEMPLATE = Template(f"""You are a UI Code Modifier. Apply the user's change request to an existing React component.

{COMPONENT_CONTEXT}

CRITICAL RULES:
- Modify the existing code, do NOT rewrite it from scratch
- Preserve existing components and structure unless asked to remove them
- Only add, remove or change what the user asks for
- Keep existing imports, state and data unless they must change
- Output the COMPLETE modified component, with every unchanged part intact
- No inline styles, no new components, no external libraries
- Import path must be exactly '{LIBRARY_IMPORT}'

OUTPUT FORMAT - only the complete modified code, no markdown fences, no explanations.

Current code:
$current_code

User's modification request: $request

Output the modified code:""")


# ============================================================================
# Explainer
# ============================================================================

EXPLAINER_TEMPLATE = Template("""You are a UI Decision Explainer. Explain in plain English why the UI was built this way.

Provide 3-5 bullet points that:
- Explain the layout choice and why it fits the request
- List the components that were selected and why
- Note any assumptions made about the user's intent
- Mention alternative approaches that could also work

Keep it conversational. Use bullet points. Do not include code.

User request: $request

Plan: $plan

Generated code: $code

Provide your explanation:""")

MODIFICATION_EXPLAINER_TEMPLATE = Template("""You are a UI Decision Explainer. The user asked for a change to an existing UI.

User's modification request: $request

Briefly explain (3-5 bullet points):
- What changed in the UI
- Which components were added, removed or modified
- Why these changes match the request
- Any assumptions made

Keep it conversational. Use bullet points. Do not include code.

Previous code length: $old_length characters
New code length: $new_length characters
""")


def get_planner_prompt(intent: str) -> str:
    return PLANNER_INSTRUCTIONS + intent


def get_generator_prompt(plan_json: str) -> str:
    return GENERATOR_INSTRUCTIONS + plan_json


def get_modifier_prompt(current_code: str, request: str) -> str:
    return MODIFIER_TEMPLATE.substitute(current_code=current_code, request=request)


def get_explainer_prompt(request: str, plan_json: str, code: str) -> str:
    return EXPLAINER_TEMPLATE.substitute(request=request, plan=plan_json, code=code)


def get_modification_explainer_prompt(old_code: str, new_code: str, request: str) -> str:
    return MODIFICATION_EXPLAINER_TEMPLATE.substitute(
        request=request, old_length=len(old_code), new_length=len(new_code)
    )
