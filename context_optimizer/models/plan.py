"""Optimization plan and result models."""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ActionType, IssueType, Strategy
from .issues import LineRange

# ============ PLAN MODELS ============


class OptimizationAction(BaseModel):
    """A concrete, section-scoped edit."""

    type: ActionType = Field(..., description="Type of edit")
    section_name: str = Field(..., description="Section being optimized")
    reason: str = Field(default="", description="Why this action was generated")
    before: str = Field(default="", description="Original content (truncated for display)")
    after: str = Field(default="", description="Replacement content (truncated for display)")
    lines_saved: int = Field(default=0, description="Lines removed when applied")
    tokens_saved: int = Field(default=0, description="Estimated tokens saved")
    line_range: LineRange = Field(..., description="Affected line range")
    issue_type: IssueType | None = Field(default=None, description="Originating issue")
    priority: int = Field(default=3, ge=1, description="Apply order (1=highest)")
    archive_path: str | None = Field(default=None, description="Archive: reference path")
    keep_lines: int | None = Field(default=None, ge=1, description="Condense: summary lines")
    reference_file: str | None = Field(default=None, description="Dedupe: referenced file")


class PlanSummary(BaseModel):
    """Projected effect of a plan."""

    current_lines: int = Field(default=0, ge=0)
    projected_lines: int = Field(default=0, ge=0)
    current_tokens: int = Field(default=0, ge=0)
    projected_tokens: int = Field(default=0, ge=0)
    reduction_percent: int = 0
    actions_count: int = Field(default=0, ge=0)


class OptimizationPlan(BaseModel):
    """An ordered, reversible set of edits for one document."""

    strategy: Strategy
    actions: list[OptimizationAction] = Field(default_factory=list)
    summary: PlanSummary = Field(default_factory=PlanSummary)
    generated_at: datetime
    preserved_sections: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class PlanPreviewItem(BaseModel):
    """Display row for one planned action."""

    type: ActionType
    section: str
    reason: str
    savings: str


class PlanPreview(BaseModel):
    """Human-readable preview of a plan."""

    actions: list[PlanPreviewItem] = Field(default_factory=list)
    summary: str = ""


# ============ RESULT MODELS ============


class FailedAction(BaseModel):
    """An action that could not be applied."""

    action: OptimizationAction
    error: str


class ResultSummary(BaseModel):
    """Before/after measurements of an applied plan."""

    original_lines: int = 0
    new_lines: int = 0
    original_tokens: int = 0
    new_tokens: int = 0
    lines_saved: int = 0
    tokens_saved: int = 0
    reduction_percent: int = 0


class OptimizationResult(BaseModel):
    """Outcome of applying a plan to a document."""

    success: bool = Field(..., description="False if any action failed")
    new_content: str = Field(..., description="Document after the applied actions")
    applied_actions: list[OptimizationAction] = Field(default_factory=list)
    failed_actions: list[FailedAction] = Field(default_factory=list)
    summary: ResultSummary = Field(default_factory=ResultSummary)
