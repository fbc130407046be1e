"""Optimization planning and application.

Usage:
    from context_optimizer.engine.optimizer import generate_plan, apply_plan

    plan = generate_plan(analysis, classified, issues, Strategy.MODERATE)
    result = apply_plan(plan, analysis.raw_content)
"""

from .applier import apply_plan, splice_lines
from .edits import (
    archive_reference,
    build_replacement,
    condensed_summary,
    dedupe_reference,
)
from .planner import generate_plan, preview_plan
from .strategy import (
    STRATEGY_CONFIG,
    StrategyConfig,
    get_recommended_strategy,
    get_strategy_description,
    resolve_strategy_config,
)

__all__ = [
    # Strategies
    "STRATEGY_CONFIG",
    "StrategyConfig",
    "get_recommended_strategy",
    "get_strategy_description",
    "resolve_strategy_config",
    # Planning
    "generate_plan",
    "preview_plan",
    # Application
    "apply_plan",
    "splice_lines",
    # Replacement text
    "archive_reference",
    "build_replacement",
    "condensed_summary",
    "dedupe_reference",
]
