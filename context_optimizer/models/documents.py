"""Document analysis models: parsed sections, stale dates, classification."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import Actionability, Recommendation, SectionType

# ============ ANALYZER MODELS ============


class ParsedSection(BaseModel):
    """A header-delimited section of a CLAUDE.md document.

    Line numbers are 1-indexed and inclusive. ``content`` excludes the header
    line and is trimmed.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Header text")
    level: int = Field(..., ge=1, le=6, description="Header depth (1-6)")
    start_line: int = Field(..., ge=1, description="Header line number (1-indexed)")
    end_line: int = Field(..., ge=1, description="Last line of the section (inclusive)")
    line_count: int = Field(..., ge=1, description="Lines including the header")
    content: str = Field(default="", description="Body without the header line")
    estimated_tokens: int = Field(default=0, ge=0, description="Estimated body tokens")

    @property
    def header_line(self) -> str:
        """Markdown header line that opens this section."""
        return f"{'#' * self.level} {self.name}"

    def contains_line(self, line_number: int) -> bool:
        return self.start_line <= line_number <= self.end_line


class StaleDate(BaseModel):
    """An outdated date reference found in the document."""

    date_string: str = Field(..., description="The date text as written")
    line_number: int = Field(..., ge=1, description="Line where the date was found")
    context: str = Field(default="", description="Surrounding text snippet")
    days_old: int = Field(..., description="Age of the reference in days")


class AnalysisResult(BaseModel):
    """Result of analyzing one CLAUDE.md document."""

    file_path: str = Field(default="CLAUDE.md", description="Logical path of the document")
    total_lines: int = Field(..., ge=0)
    total_tokens: int = Field(..., ge=0)
    sections: list[ParsedSection] = Field(default_factory=list)
    stale_dates: list[StaleDate] = Field(default_factory=list)
    raw_content: str = Field(default="")
    analyzed_at: datetime


class SectionStats(BaseModel):
    """Aggregate statistics over parsed sections."""

    total_sections: int = 0
    total_lines: int = 0
    total_tokens: int = 0
    avg_lines_per_section: int = 0
    avg_tokens_per_section: int = 0
    largest_section: ParsedSection | None = None
    smallest_section: ParsedSection | None = None


# ============ CLASSIFIER MODELS ============


class SectionMatch(BaseModel):
    """Outcome of matching a section against the category table."""

    type: SectionType = SectionType.UNKNOWN
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    matched_keywords: list[str] = Field(default_factory=list)


class ClassifiedSection(BaseModel):
    """A parsed section with its category and assessment."""

    section: ParsedSection
    type: SectionType
    actionability: Actionability
    staleness: float = Field(..., ge=0.0, le=1.0, description="0 = fresh, 1 = very stale")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Classification confidence")
    matched_keywords: list[str] = Field(default_factory=list)
    recommendation: Recommendation


class ClassificationStats(BaseModel):
    """Counts and averages over classified sections."""

    by_type: dict[SectionType, int] = Field(default_factory=dict)
    by_actionability: dict[Actionability, int] = Field(default_factory=dict)
    by_recommendation: dict[Recommendation, int] = Field(default_factory=dict)
    avg_staleness: float = 0.0
    avg_confidence: float = 0.0
