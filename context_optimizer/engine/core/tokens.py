"""Token counting utilities.

Token counts are estimated rather than tokenized: the optimizer compares
sections against each other and against fixed thresholds, so a stable,
dependency-free approximation is all it needs.
"""

import math

# Average characters per token for English prose and markdown
CHARS_PER_TOKEN = 4


def count_tokens(text: str) -> int:
    """Estimate token count for a string.

    Uses ``ceil(len(text) / 4)``. Empty text counts as zero tokens.

    Args:
        text: Text to count tokens for

    Returns:
        Estimated number of tokens
    """
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up.

    Savings estimates use this instead of ``round()`` so that 2.5 becomes 3
    rather than 2.
    """
    return math.floor(value + 0.5)
