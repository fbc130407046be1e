"""Context optimization API endpoints.

Stateless wrappers around the engine: every request carries the CLAUDE.md
body and receives plain JSON results. Nothing is stored.

Base URL: /v1/context
"""

import logging
from collections import Counter
from typing import Annotated

from fastapi import APIRouter, Depends

from ..config import settings
from ..engine import analyze_context, optimize
from ..engine.optimizer import generate_plan, get_strategy_description, preview_plan
from ..engine.rules import DEFAULT_RULES, PatternCache, validate_rule
from ..models import (
    AnalyzeRequest,
    ContextAnalysis,
    OptimizationOutput,
    OptimizeRequest,
    PreviewResponse,
    RulesResponse,
    RuleValidation,
    Strategy,
    StrategyInfo,
    ValidateRuleRequest,
)
from .deps import check_content_size, get_pattern_cache, resolve_rules

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/context", tags=["Context"])

CacheDep = Annotated[PatternCache, Depends(get_pattern_cache)]


def _analyze(request: AnalyzeRequest | OptimizeRequest, cache: PatternCache) -> ContextAnalysis:
    check_content_size(request.content)
    rules = resolve_rules(request.rules, cache)
    return analyze_context(
        request.content,
        file_path=request.file_path or settings.default_source_file,
        rules=rules,
        cache=cache,
    )


# ============ ANALYSIS ============


@router.post("/analyze", response_model=ContextAnalysis)
def analyze(request: AnalyzeRequest, cache: CacheDep) -> ContextAnalysis:
    """Analyze a CLAUDE.md body: sections, classification, issues and score."""
    return _analyze(request, cache)


# ============ OPTIMIZATION ============


@router.post("/optimize/preview", response_model=PreviewResponse)
def optimize_preview(request: OptimizeRequest, cache: CacheDep) -> PreviewResponse:
    """Generate a plan without applying it."""
    context = _analyze(request, cache)
    plan = generate_plan(
        context.analysis,
        context.classified,
        context.issues,
        request.strategy or context.recommended_strategy,
        custom_config=request.custom_config,
    )
    return PreviewResponse(plan=plan, preview=preview_plan(plan))


@router.post("/optimize", response_model=OptimizationOutput)
def optimize_content(request: OptimizeRequest, cache: CacheDep) -> OptimizationOutput:
    """Generate and apply a plan; returns new content and archive files to write."""
    context = _analyze(request, cache)
    output = optimize(
        context,
        strategy=request.strategy,
        project_path=request.project_path or settings.default_project_path,
        custom_config=request.custom_config,
    )
    logger.info(
        f"Optimized {context.analysis.file_path}: "
        f"{output.result.summary.lines_saved} lines saved, {len(output.archives)} archives"
    )
    return output


@router.get("/strategies", response_model=list[StrategyInfo])
def list_strategies() -> list[StrategyInfo]:
    return [StrategyInfo(strategy=s, description=get_strategy_description(s)) for s in Strategy]


# ============ RULES ============


@router.get("/rules", response_model=RulesResponse)
def list_rules() -> RulesResponse:
    """List the built-in rules."""
    by_type = Counter(rule.rule_type.value for rule in DEFAULT_RULES)
    return RulesResponse(
        rules=list(DEFAULT_RULES),
        stats={
            "total": len(DEFAULT_RULES),
            "enabled": sum(1 for rule in DEFAULT_RULES if rule.enabled),
            "by_type": dict(by_type),
        },
    )


@router.post("/rules/validate", response_model=RuleValidation)
def validate_rule_record(request: ValidateRuleRequest, cache: CacheDep) -> RuleValidation:
    return validate_rule(request.rule, cache)
