"""Context optimization engine.

Stages, in pipeline order:
- core: section parsing, token estimates, stale dates
- scoring: section classification
- detector / rules: issue generation
- optimizer: planning and application
- archiver: archive payloads
"""

from .pipeline import (
    analyze_context,
    analyze_context_file,
    calculate_context_optimization_score,
    get_quick_stats,
    get_recommendations,
    merge_issues,
    needs_optimization,
    optimize,
)

__all__ = [
    "analyze_context",
    "analyze_context_file",
    "calculate_context_optimization_score",
    "get_quick_stats",
    "get_recommendations",
    "merge_issues",
    "needs_optimization",
    "optimize",
]
