"""nextforge requirement planner.

Classifies a project description into a structured plan of components,
pages, features and data structures.

Usage::

    from nextforge.planner import analyze_requirements

    plan = await analyze_requirements(client, "a landing page with pricing")
    for component in plan.components:
        print(component.name, component.type)
"""

from nextforge.planner.models import (
    ComponentSpec,
    PageSpec,
    ProjectPlan,
)
from nextforge.planner.requirements import (
    PlanningError,
    PlanParseError,
    analyze_requirements,
    parse_plan,
)

__all__ = [
    "analyze_requirements",
    "parse_plan",
    "ComponentSpec",
    "PageSpec",
    "ProjectPlan",
    "PlanningError",
    "PlanParseError",
]
