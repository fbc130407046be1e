"""CLAUDE.md context optimizer.

Parses a project's CLAUDE.md, classifies its sections, detects token-wasting
issues and produces a reversible plan of archive / condense / dedupe edits.
"""

from .engine import (
    analyze_context,
    analyze_context_file,
    calculate_context_optimization_score,
    get_quick_stats,
    get_recommendations,
    needs_optimization,
    optimize,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "analyze_context",
    "analyze_context_file",
    "calculate_context_optimization_score",
    "get_quick_stats",
    "get_recommendations",
    "needs_optimization",
    "optimize",
]
