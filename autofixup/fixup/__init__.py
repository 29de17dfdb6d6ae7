"""Fixup feature for autofixup - fold staged hunks into earlier commits.

This package provides modular fixup handling with:
- models: Transformation, AttributionDecision, RunState, split_lines
- parser: parse_transformations
- attribution: AttributionResolver
- planner: FixupPlanner, plan_transformations
- orchestrator: RunOrchestrator, format_undo_message, TEMP_COMMIT_MESSAGE
"""

# Models
from autofixup.fixup.models import (
    AttributionDecision,
    RunState,
    Transformation,
    split_lines,
)

# Parser
from autofixup.fixup.parser import (
    parse_transformations,
)

# Attribution
from autofixup.fixup.attribution import (
    AttributionResolver,
)

# Planner
from autofixup.fixup.planner import (
    FixupPlanner,
    plan_transformations,
)

# Orchestrator
from autofixup.fixup.orchestrator import (
    TEMP_COMMIT_MESSAGE,
    RunOrchestrator,
    format_undo_message,
)


__all__ = [
    # Models
    "Transformation",
    "AttributionDecision",
    "RunState",
    "split_lines",
    # Parser
    "parse_transformations",
    # Attribution
    "AttributionResolver",
    # Planner
    "FixupPlanner",
    "plan_transformations",
    # Orchestrator
    "RunOrchestrator",
    "format_undo_message",
    "TEMP_COMMIT_MESSAGE",
]
