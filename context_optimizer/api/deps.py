"""Shared dependencies for API endpoints.

This module contains:
- Request-scoped pattern cache
- Content size enforcement
- Custom rule resolution
- Error message sanitization
"""

import logging
from typing import Any

from ..config import settings
from ..engine.rules import DEFAULT_RULES, PatternCache, merge_rules, rule_from_record
from ..exceptions import ContentTooLargeError
from ..models import OptimizationRule

logger = logging.getLogger(__name__)


# ============ ERROR HANDLING ============


def sanitize_error_message(error: Exception) -> str:
    """
    Sanitize error messages to prevent information disclosure.

    Returns a generic message for unexpected errors while preserving
    useful information for known error types.
    """
    error_str = str(error)

    # Known safe error patterns that can be returned to client
    safe_patterns = [
        "Invalid rule",
        "Invalid section_pattern regex",
        "Invalid content_pattern regex",
        "Rule must have",
        "Action must have",
        "Rule action is not valid JSON",
        "Content is",
        "File not found",
    ]

    for pattern in safe_patterns:
        if pattern.lower() in error_str.lower():
            return error_str

    logger.error(f"Request processing error: {error}", exc_info=error)
    return "An error occurred processing your request. Please try again."


# ============ DEPENDENCIES ============


def get_pattern_cache() -> PatternCache:
    """One compiled-pattern cache per request."""
    return PatternCache()


def check_content_size(content: str) -> None:
    """Reject documents larger than settings.max_content_bytes.

    Raises:
        ContentTooLargeError: If the UTF-8 encoded content is too large
    """
    size = len(content.encode("utf-8"))
    if size > settings.max_content_bytes:
        raise ContentTooLargeError(size, settings.max_content_bytes)


def resolve_rules(
    records: list[dict[str, Any]] | None, cache: PatternCache
) -> list[OptimizationRule]:
    """Merge custom rule records over the default rules.

    Raises:
        InvalidRuleError: If any record is not a valid rule
    """
    if not records:
        return list(DEFAULT_RULES)
    custom = [rule_from_record(record, cache) for record in records]
    logger.debug(f"Merged {len(custom)} custom rules over defaults")
    return merge_rules(custom)
