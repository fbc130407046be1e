"""Compiled regex cache for rule evaluation."""

import re


class PatternCache:
    """Caller-owned cache of compiled rule patterns.

    Rules keep their regexes as source strings; evaluation compiles each one
    once per cache. Create one cache per batch of evaluations (a request, a
    test) and pass it to every call that should share compiled patterns.
    """

    def __init__(self) -> None:
        self._compiled: dict[str, re.Pattern[str]] = {}

    def compile(self, pattern: str) -> re.Pattern[str]:
        """Return the compiled form of ``pattern``.

        Raises:
            re.error: If the pattern is not a valid regular expression
        """
        compiled = self._compiled.get(pattern)
        if compiled is None:
            compiled = re.compile(pattern)
            self._compiled[pattern] = compiled
        return compiled

    def search(self, pattern: str, text: str) -> bool:
        return self.compile(pattern).search(text) is not None

    def clear(self) -> None:
        self._compiled.clear()

    def __len__(self) -> int:
        return len(self._compiled)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._compiled
