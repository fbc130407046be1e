"""Engine core module.

This module contains the document-level building blocks of the optimizer:
- Token estimation
- Markdown section parsing
- Stale date detection
- Document analysis
"""

from .dates import (
    OLD_YEAR_SPAN,
    STALE_AFTER_DAYS,
    detect_stale_dates,
    extract_dates,
)
from .parser import (
    HEADER_PATTERN,
    analyze_content,
    analyze_file,
    find_section,
    get_section_stats,
    get_sections_by_level,
    parse_sections,
)
from .tokens import count_tokens, round_half_up

__all__ = [
    # Token utilities
    "count_tokens",
    "round_half_up",
    # Parsing
    "HEADER_PATTERN",
    "parse_sections",
    "analyze_content",
    "analyze_file",
    "find_section",
    "get_sections_by_level",
    "get_section_stats",
    # Dates
    "OLD_YEAR_SPAN",
    "STALE_AFTER_DAYS",
    "detect_stale_dates",
    "extract_dates",
]
