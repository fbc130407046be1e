"""Request and response bodies for the HTTP service."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .enums import IssueType, SectionType, Strategy
from .plan import OptimizationPlan, PlanPreview
from .rules import OptimizationRule

# ============ REQUEST MODELS ============


class AnalyzeRequest(BaseModel):
    """Body of POST /v1/context/analyze."""

    content: str = Field(..., description="CLAUDE.md body")
    file_path: str | None = Field(default=None, description="Logical path of the document")
    rules: list[dict[str, Any]] | None = Field(
        default=None,
        description="Custom rule records merged over the defaults (patterns as strings)",
    )


class CustomStrategyConfig(BaseModel):
    """Overrides for the custom strategy."""

    archive_threshold: int | None = Field(default=None, ge=1)
    condense_threshold: int | None = Field(default=None, ge=1)
    include_issue_types: list[IssueType] | None = None
    preserve_types: list[SectionType] | None = None
    max_actions: int | None = Field(default=None, ge=0)


class OptimizeRequest(BaseModel):
    """Body of POST /v1/context/optimize and /optimize/preview."""

    content: str = Field(..., description="CLAUDE.md body")
    file_path: str | None = Field(default=None, description="Logical path of the document")
    strategy: Strategy | None = Field(
        default=None, description="Strategy to use (recommended strategy when omitted)"
    )
    custom_config: CustomStrategyConfig | None = Field(
        default=None, description="Threshold overrides for the custom strategy"
    )
    project_path: str | None = Field(default=None, description="Base path for archive files")
    rules: list[dict[str, Any]] | None = Field(default=None)


class ValidateRuleRequest(BaseModel):
    """Body of POST /v1/context/rules/validate."""

    rule: dict[str, Any] = Field(..., description="Rule record to validate")


# ============ RESPONSE MODELS ============


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(..., description="Current server time")


class PreviewResponse(BaseModel):
    """Response of POST /v1/context/optimize/preview."""

    plan: OptimizationPlan
    preview: PlanPreview


class RulesResponse(BaseModel):
    """Response of GET /v1/context/rules."""

    rules: list[OptimizationRule] = Field(default_factory=list)
    stats: dict[str, Any] = Field(default_factory=dict)


class StrategyInfo(BaseModel):
    """A strategy with its description."""

    strategy: Strategy
    description: str
