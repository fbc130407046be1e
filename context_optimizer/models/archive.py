"""Archive payload models."""

from datetime import datetime

from pydantic import BaseModel, Field


class ArchiveMetadata(BaseModel):
    """Provenance of an archived section."""

    section_name: str = Field(..., description="Original section name")
    source_file: str = Field(default="CLAUDE.md", description="Document the section came from")
    archived_at: datetime = Field(..., description="When the archive was created")
    original_lines: int = Field(..., ge=0)
    original_tokens: int = Field(..., ge=0)
    reason: str = Field(default="Optimization")
    summary: str = Field(default="", description="Generated summary text")


class ArchiveContent(BaseModel):
    """A file the caller should write alongside an archive action."""

    path: str = Field(..., description="Where the archive should be written")
    content: str = Field(..., description="Full archive file body")
    metadata: ArchiveMetadata


class ArchiveReference(BaseModel):
    """An archive pointer found in a live document."""

    archive_path: str
    line_number: int = Field(..., ge=1)
    context: str = ""


class ArchiveDirectoryInfo(BaseModel):
    """Layout of the archive directory."""

    archive_dir: str
    pattern: str
    description: str


class ArchiveStats(BaseModel):
    """Aggregate statistics over archives."""

    total_archives: int = 0
    total_lines: int = 0
    total_tokens: int = 0
    avg_lines_per_archive: int = 0
    by_reason: dict[str, int] = Field(default_factory=dict)
