"""Section classification for CLAUDE.md documents.

This module assigns each parsed section:
- A section type from keyword matches on header and body
- An actionability level (how useful it is to an active session)
- A staleness score from dates, section type and outdated phrasing
- A recommendation (keep, archive, condense, review, dedupe)
"""

import logging
from collections import Counter

from ...models import (
    Actionability,
    ClassificationStats,
    ClassifiedSection,
    ParsedSection,
    Recommendation,
    SectionMatch,
    SectionType,
    StaleDate,
)
from .constants import (
    ACTIONABILITY_STALE_DATE_LIMIT,
    ARCHIVE_STALENESS,
    CONDENSE_LINE_COUNT,
    CONFIDENCE_SCALE,
    CONTENT_KEYWORD_WEIGHT,
    DATE_STALENESS_HORIZON_DAYS,
    LARGE_HISTORICAL_SECTION_LINES,
    LOW_VALUE_TYPES,
    MAX_DATE_STALENESS,
    NAME_KEYWORD_WEIGHT,
    REVIEW_STALENESS,
    RULES_BY_PRIORITY,
    RULES_BY_TYPE,
    SMALL_SECTION_LINES,
    STALE_PHRASE_WEIGHT,
    STALE_PHRASES,
    TYPE_STALENESS_BIAS,
    UNKNOWN_ACTIONABILITY,
    UNKNOWN_RECOMMENDATION,
)

logger = logging.getLogger(__name__)

# One step down the actionability ladder
_DOWNGRADE = {
    Actionability.HIGH: Actionability.MEDIUM,
    Actionability.MEDIUM: Actionability.LOW,
    Actionability.LOW: Actionability.LOW,
}


def _dates_in_section(section: ParsedSection, stale_dates: list[StaleDate]) -> list[StaleDate]:
    return [sd for sd in stale_dates if section.contains_line(sd.line_number)]


def classify_section(name: str, content: str) -> SectionMatch:
    """Classify a section by its header name and body.

    Every category scores +3 per header keyword and +1 per content keyword.
    Categories are visited in priority order and only a strictly higher
    score replaces the current best, so priority breaks ties.

    Args:
        name: Section header text
        content: Section body

    Returns:
        Best matching type with confidence and the keywords that matched
    """
    lower_name = name.lower()
    lower_content = content.lower()

    best: SectionMatch | None = None
    best_score = 0

    for rule in RULES_BY_PRIORITY:
        score = 0
        keywords: list[str] = []

        for keyword in rule.name_keywords:
            if keyword in lower_name:
                score += NAME_KEYWORD_WEIGHT
                keywords.append(keyword)

        for keyword in rule.content_keywords:
            if keyword in lower_content:
                score += CONTENT_KEYWORD_WEIGHT
                keywords.append(keyword)

        if score > best_score:
            best_score = score
            best = SectionMatch(
                type=rule.type,
                confidence=min(score / CONFIDENCE_SCALE, 1.0),
                matched_keywords=keywords,
            )

    return best or SectionMatch()


def assess_actionability(
    section: ParsedSection,
    section_type: SectionType,
    stale_dates: list[StaleDate] | None = None,
) -> Actionability:
    """Estimate how useful a section is to an active coding session."""
    rule = RULES_BY_TYPE.get(section_type)
    actionability = rule.default_actionability if rule else UNKNOWN_ACTIONABILITY

    if len(_dates_in_section(section, stale_dates or [])) > ACTIONABILITY_STALE_DATE_LIMIT:
        actionability = _DOWNGRADE[actionability]

    if section.line_count > LARGE_HISTORICAL_SECTION_LINES and section_type in LOW_VALUE_TYPES:
        actionability = Actionability.LOW

    if section.line_count < SMALL_SECTION_LINES and actionability == Actionability.MEDIUM:
        actionability = Actionability.HIGH

    return actionability


def assess_staleness(
    section: ParsedSection,
    section_type: SectionType,
    stale_dates: list[StaleDate] | None = None,
) -> float:
    """Score how outdated a section is likely to be.

    Args:
        section: Section to score
        section_type: Classified type of the section
        stale_dates: Stale dates of the whole document

    Returns:
        Score from 0 (fresh) to 1 (very stale)
    """
    staleness = 0.0

    in_section = _dates_in_section(section, stale_dates or [])
    if in_section:
        avg_days_old = sum(sd.days_old for sd in in_section) / len(in_section)
        staleness += min(avg_days_old / DATE_STALENESS_HORIZON_DAYS, MAX_DATE_STALENESS)

    staleness += TYPE_STALENESS_BIAS.get(section_type, 0.0)

    content = section.content.lower()
    staleness += STALE_PHRASE_WEIGHT * sum(1 for phrase in STALE_PHRASES if phrase in content)

    return max(0.0, min(staleness, 1.0))


def get_recommendation(
    section_type: SectionType,
    actionability: Actionability,
    staleness: float,
    line_count: int,
) -> Recommendation:
    rule = RULES_BY_TYPE.get(section_type)
    recommendation = rule.default_recommendation if rule else UNKNOWN_RECOMMENDATION

    if staleness > ARCHIVE_STALENESS and actionability == Actionability.LOW:
        return Recommendation.ARCHIVE
    if line_count > CONDENSE_LINE_COUNT and actionability != Actionability.HIGH:
        return Recommendation.CONDENSE
    if staleness > REVIEW_STALENESS and recommendation == Recommendation.KEEP:
        return Recommendation.REVIEW
    return recommendation


def classify_sections(
    sections: list[ParsedSection],
    stale_dates: list[StaleDate] | None = None,
) -> list[ClassifiedSection]:
    """Classify every section of a document.

    Args:
        sections: Parsed sections
        stale_dates: Stale dates from the same analysis

    Returns:
        One ClassifiedSection per input section, in the same order
    """
    stale_dates = stale_dates or []
    classified: list[ClassifiedSection] = []

    for section in sections:
        match = classify_section(section.name, section.content)
        actionability = assess_actionability(section, match.type, stale_dates)
        staleness = assess_staleness(section, match.type, stale_dates)
        classified.append(
            ClassifiedSection(
                section=section,
                type=match.type,
                actionability=actionability,
                staleness=staleness,
                confidence=match.confidence,
                matched_keywords=match.matched_keywords,
                recommendation=get_recommendation(
                    match.type, actionability, staleness, section.line_count
                ),
            )
        )

    logger.debug(f"Classified {len(classified)} sections")
    return classified


def get_sections_by_type(
    classified: list[ClassifiedSection], section_type: SectionType
) -> list[ClassifiedSection]:
    return [c for c in classified if c.type == section_type]


def get_sections_by_actionability(
    classified: list[ClassifiedSection], level: Actionability
) -> list[ClassifiedSection]:
    return [c for c in classified if c.actionability == level]


def get_sections_needing_attention(classified: list[ClassifiedSection]) -> list[ClassifiedSection]:
    """Sections recommended for archiving, condensing or review."""
    attention = {Recommendation.ARCHIVE, Recommendation.CONDENSE, Recommendation.REVIEW}
    return [c for c in classified if c.recommendation in attention]


def get_classification_stats(classified: list[ClassifiedSection]) -> ClassificationStats:
    """Count sections per type, actionability and recommendation."""
    by_type = Counter(c.type for c in classified)
    by_actionability = Counter(c.actionability for c in classified)
    by_recommendation = Counter(c.recommendation for c in classified)
    count = len(classified)

    return ClassificationStats(
        by_type={t: by_type.get(t, 0) for t in SectionType},
        by_actionability={a: by_actionability.get(a, 0) for a in Actionability},
        by_recommendation={r: by_recommendation.get(r, 0) for r in Recommendation},
        avg_staleness=sum(c.staleness for c in classified) / count if count else 0.0,
        avg_confidence=sum(c.confidence for c in classified) / count if count else 0.0,
    )
