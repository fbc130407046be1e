"""Pydantic models for the Context Optimizer.

This module re-exports all models. Import from submodules directly for
cleaner imports:

    from context_optimizer.models.enums import SectionType, Strategy
    from context_optimizer.models.plan import OptimizationPlan
"""

# ============ ARCHIVE MODELS ============
from .archive import (
    ArchiveContent,
    ArchiveDirectoryInfo,
    ArchiveMetadata,
    ArchiveReference,
    ArchiveStats,
)

# ============ CONTEXT MODELS ============
from .context import (
    ContextAnalysis,
    ContextSummary,
    OptimizationOutput,
    QuickStats,
)

# ============ DOCUMENT MODELS ============
from .documents import (
    AnalysisResult,
    ClassificationStats,
    ClassifiedSection,
    ParsedSection,
    SectionMatch,
    SectionStats,
    StaleDate,
)

# ============ ENUMS ============
from .enums import (
    HISTORICAL_SECTION_TYPES,
    SEVERITY_ORDER,
    Actionability,
    ActionType,
    CondenseFormat,
    IssueSeverity,
    IssueType,
    Recommendation,
    RuleActionType,
    SectionType,
    Strategy,
)

# ============ ISSUE MODELS ============
from .issues import DetectedIssue, IssueStats, LineRange

# ============ PLAN MODELS ============
from .plan import (
    FailedAction,
    OptimizationAction,
    OptimizationPlan,
    OptimizationResult,
    PlanPreview,
    PlanPreviewItem,
    PlanSummary,
    ResultSummary,
)

# ============ REQUEST / RESPONSE MODELS ============
from .requests import (
    AnalyzeRequest,
    CustomStrategyConfig,
    HealthResponse,
    OptimizeRequest,
    PreviewResponse,
    RulesResponse,
    StrategyInfo,
    ValidateRuleRequest,
)

# ============ RULE MODELS ============
from .rules import OptimizationRule, RuleAction, RuleValidation

__all__ = [
    # Enums
    "HISTORICAL_SECTION_TYPES",
    "SEVERITY_ORDER",
    "Actionability",
    "ActionType",
    "CondenseFormat",
    "IssueSeverity",
    "IssueType",
    "Recommendation",
    "RuleActionType",
    "SectionType",
    "Strategy",
    # Document models
    "AnalysisResult",
    "ClassificationStats",
    "ClassifiedSection",
    "ParsedSection",
    "SectionMatch",
    "SectionStats",
    "StaleDate",
    # Issue models
    "DetectedIssue",
    "IssueStats",
    "LineRange",
    # Rule models
    "OptimizationRule",
    "RuleAction",
    "RuleValidation",
    # Plan models
    "FailedAction",
    "OptimizationAction",
    "OptimizationPlan",
    "OptimizationResult",
    "PlanPreview",
    "PlanPreviewItem",
    "PlanSummary",
    "ResultSummary",
    # Archive models
    "ArchiveContent",
    "ArchiveDirectoryInfo",
    "ArchiveMetadata",
    "ArchiveReference",
    "ArchiveStats",
    # Context models
    "ContextAnalysis",
    "ContextSummary",
    "OptimizationOutput",
    "QuickStats",
    # Request / response models
    "AnalyzeRequest",
    "CustomStrategyConfig",
    "HealthResponse",
    "OptimizeRequest",
    "PreviewResponse",
    "RulesResponse",
    "StrategyInfo",
    "ValidateRuleRequest",
]
