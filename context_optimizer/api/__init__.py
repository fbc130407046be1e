"""API routers and dependencies.

This package contains:
- context: the /v1/context router
- deps: FastAPI dependency functions and request helpers
"""

from .context import router as context_router
from .deps import (
    check_content_size,
    get_pattern_cache,
    resolve_rules,
    sanitize_error_message,
)

__all__ = [
    "context_router",
    "check_content_size",
    "get_pattern_cache",
    "resolve_rules",
    "sanitize_error_message",
]
