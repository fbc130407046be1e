"""Detected issue models shared by the rule engine and the detector."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from .enums import IssueSeverity, IssueType, SectionType


class LineRange(BaseModel):
    """An inclusive, 1-indexed range of document lines."""

    start: int = Field(..., description="First line (1-indexed)")
    end: int = Field(..., description="Last line (inclusive)")

    @property
    def length(self) -> int:
        return self.end - self.start + 1


class DetectedIssue(BaseModel):
    """An optimization opportunity found in one section."""

    type: IssueType = Field(..., description="Issue category")
    severity: IssueSeverity = Field(..., description="Severity level")
    section_name: str = Field(..., description="Section where the issue was found")
    section_type: SectionType = Field(..., description="Classified section type")
    description: str = Field(..., description="Human-readable description")
    suggested_action: str = Field(..., description="Suggested resolution")
    estimated_savings: int = Field(..., ge=0, description="Tokens that could be saved")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detection confidence")
    line_range: LineRange = Field(..., description="Affected line range")
    details: dict[str, Any] = Field(default_factory=dict, description="Evidence")

    @model_validator(mode="before")
    @classmethod
    def _clamp_savings(cls, data: Any) -> Any:
        # Heuristic formulas can dip below zero on tiny sections
        if isinstance(data, dict) and isinstance(data.get("estimated_savings"), int | float):
            data = {**data, "estimated_savings": max(0, int(data["estimated_savings"]))}
        return data


class IssueStats(BaseModel):
    """Aggregate statistics over a list of issues."""

    total: int = 0
    by_severity: dict[IssueSeverity, int] = Field(default_factory=dict)
    by_type: dict[IssueType, int] = Field(default_factory=dict)
    total_savings: int = 0
    avg_confidence: float = 0.0
