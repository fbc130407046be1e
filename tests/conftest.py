"""Pytest configuration and fixtures for context optimizer tests"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from context_optimizer.engine.core import count_tokens
from context_optimizer.engine.rules import PatternCache
from context_optimizer.models import (
    Actionability,
    ClassifiedSection,
    ParsedSection,
    Recommendation,
    SectionType,
)
from context_optimizer.server import app


@pytest.fixture
def now():
    """Fixed reference time so stale date checks are deterministic"""
    return datetime(2025, 6, 15)


@pytest.fixture
def cache():
    """Fresh compiled-pattern cache for each test"""
    return PatternCache()


@pytest.fixture
def make_section():
    """Factory for parsed sections with a generated bullet body"""

    def _make(name="Section", line_count=10, content=None, start_line=1, level=2):
        if content is None:
            content = "\n".join(f"- item {i}" for i in range(line_count - 1))
        return ParsedSection(
            name=name,
            level=level,
            start_line=start_line,
            end_line=start_line + line_count - 1,
            line_count=line_count,
            content=content,
            estimated_tokens=count_tokens(content),
        )

    return _make


@pytest.fixture
def make_classified(make_section):
    """Factory for classified sections with explicit assessment values"""

    def _make(
        name="Section",
        section_type=SectionType.UNKNOWN,
        line_count=10,
        content=None,
        start_line=1,
        actionability=Actionability.MEDIUM,
        staleness=0.0,
        confidence=0.5,
        recommendation=Recommendation.REVIEW,
    ):
        return ClassifiedSection(
            section=make_section(name, line_count, content, start_line),
            type=section_type,
            actionability=actionability,
            staleness=staleness,
            confidence=confidence,
            matched_keywords=[],
            recommendation=recommendation,
        )

    return _make


@pytest.fixture
def history_doc():
    """A short overview followed by 60 lines of dated completed work"""
    bullets = [
        f"- Implemented feature {i} on March {i % 28 + 1}, 2024" for i in range(59)
    ]
    return "\n".join(
        [
            "# Project Overview",
            "Task tracker with a small web front end.",
            "## Completed Work",
            *bullets,
        ]
    )


@pytest.fixture
def examples_doc():
    """A section holding six fenced code examples"""
    body: list[str] = []
    for i in range(1, 7):
        body.extend([f"Example {i}:", "```", f"print({i})", "```", ""])
    return "\n".join(["# Project Overview", "A small tool.", "", "## Examples", *body])


@pytest.fixture
def client():
    """Test client with the application lifespan running"""
    with TestClient(app) as test_client:
        yield test_client
