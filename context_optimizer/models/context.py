"""End-to-end context analysis models."""

from pydantic import BaseModel, Field

from .archive import ArchiveContent
from .documents import AnalysisResult, ClassifiedSection
from .enums import Strategy
from .issues import DetectedIssue
from .plan import OptimizationPlan, OptimizationResult


class ContextSummary(BaseModel):
    """Headline numbers for a context analysis."""

    total_lines: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    sections_count: int = Field(default=0, ge=0)
    issues_count: int = Field(default=0, ge=0)
    estimated_savings: int = Field(default=0, ge=0)
    savings_percent: int = Field(default=0, ge=0)


class ContextAnalysis(BaseModel):
    """Complete analysis of a CLAUDE.md document."""

    analysis: AnalysisResult
    classified: list[ClassifiedSection] = Field(default_factory=list)
    issues: list[DetectedIssue] = Field(default_factory=list)
    recommended_strategy: Strategy
    optimization_score: int = Field(
        ..., ge=0, le=100, description="100 = nothing left to optimize"
    )
    summary: ContextSummary = Field(default_factory=ContextSummary)


class OptimizationOutput(BaseModel):
    """A plan, the result of applying it, and the archive files to write."""

    result: OptimizationResult
    archives: list[ArchiveContent] = Field(default_factory=list)
    plan: OptimizationPlan


class QuickStats(BaseModel):
    """Lightweight numbers for dashboards."""

    lines: int = 0
    tokens: int = 0
    sections: int = 0
    score: int = 100
