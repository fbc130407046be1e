"""Declarative optimization rule records.

Rules are immutable value objects. Regex criteria are stored as pattern source
strings (inline flags such as ``(?i)`` are allowed) and compiled on demand
through a caller-owned ``PatternCache``.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import CondenseFormat, IssueSeverity, IssueType, RuleActionType, SectionType


class RuleAction(BaseModel):
    """What to do when a rule matches."""

    model_config = ConfigDict(frozen=True)

    type: RuleActionType = Field(..., description="Action type")
    keep_lines: int | None = Field(default=None, ge=1, description="Condense: lines to keep")
    format: CondenseFormat | None = Field(default=None, description="Condense: output style")
    summary_template: str | None = Field(default=None, description="Archive: reference text")
    reference_file: str | None = Field(default=None, description="Dedupe: file to point at")
    replacement_template: str | None = Field(default=None, description="Dedupe: reference text")
    message: str | None = Field(default=None, description="Flag: message to show")


class OptimizationRule(BaseModel):
    """A declarative matcher plus the action it triggers."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Display name")
    description: str | None = Field(default=None)
    rule_type: RuleActionType = Field(..., description="Rule category")
    section_pattern: str | None = Field(
        default=None, description="Regex matched against the section header line"
    )
    content_pattern: str | None = Field(default=None, description="Regex matched against content")
    section_types: tuple[SectionType, ...] = Field(
        default=(), description="Section types this rule applies to (empty = all)"
    )
    age_threshold: int | None = Field(default=None, ge=0, description="Minimum age in days")
    line_threshold: int | None = Field(default=None, ge=0, description="Minimum lines")
    token_threshold: int | None = Field(default=None, ge=0, description="Minimum tokens")
    staleness_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    action: RuleAction
    enabled: bool = True
    priority: int = Field(default=0, description="Higher = evaluated first")
    issue_type: IssueType | None = None
    severity: IssueSeverity | None = None


class RuleValidation(BaseModel):
    """Outcome of validating a rule definition."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
