"""
Graceful degradation registry.

A fixed catalogue of recognized failure scenarios, each mapped to a
pre-approved substitute behavior that lets the pipeline continue with
reduced output quality instead of halting. Callers consult it explicitly
when they recognize one of these scenarios; it is independent of the
retry/fallback decision.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional, Union

import structlog

from pipeline_resilience.models.decisions import DegradationResult, DegradationStrategy
from pipeline_resilience.models.enums import DegradationScenario, FallbackAction

logger = structlog.get_logger(__name__)

UNKNOWN_SCENARIO = "unknown scenario"

STRATEGIES: Mapping[DegradationScenario, DegradationStrategy] = MappingProxyType({
    DegradationScenario.SEARCH_UNAVAILABLE: DegradationStrategy(
        scenario=DegradationScenario.SEARCH_UNAVAILABLE,
        fallback_action=FallbackAction.USE_CACHED_EVIDENCE,
        message="Web search unavailable, using cached evidence base",
        continue_workflow=True,
    ),
    DegradationScenario.FULL_TEXT_UNAVAILABLE: DegradationStrategy(
        scenario=DegradationScenario.FULL_TEXT_UNAVAILABLE,
        fallback_action=FallbackAction.PROCEED_WITH_ABSTRACT,
        message="Full text not available, proceeding with abstract",
        continue_workflow=True,
        flag_for_review=True,
    ),
    DegradationScenario.CROSS_REFERENCE_SCRAPE_FAILED: DegradationStrategy(
        scenario=DegradationScenario.CROSS_REFERENCE_SCRAPE_FAILED,
        fallback_action=FallbackAction.SKIP_CROSSREFS,
        message="FOAM resource scraping failed, cross-references will need manual addition",
        continue_workflow=True,
        placeholder="[FOAMED CROSSREFS NEEDED]",
    ),
    DegradationScenario.PRIMARY_MODEL_UNAVAILABLE: DegradationStrategy(
        scenario=DegradationScenario.PRIMARY_MODEL_UNAVAILABLE,
        fallback_action=FallbackAction.USE_FALLBACK_MODEL,
        message="Primary model unavailable, using fallback",
        continue_workflow=True,
    ),
    DegradationScenario.VALIDATION_FAILED: DegradationStrategy(
        scenario=DegradationScenario.VALIDATION_FAILED,
        fallback_action=FallbackAction.FLAG_FOR_REVIEW,
        message="Automated validation failed, flagging for manual review",
        continue_workflow=True,
        requires_manual_review=True,
    ),
})

# Scenario names used by workflows built before the kebab-case keys
LEGACY_SCENARIO_KEYS: Mapping[str, DegradationScenario] = MappingProxyType({
    "WEB_SEARCH_FAILS": DegradationScenario.SEARCH_UNAVAILABLE,
    "FULL_TEXT_UNAVAILABLE": DegradationScenario.FULL_TEXT_UNAVAILABLE,
    "FOAMED_SCRAPING_FAILS": DegradationScenario.CROSS_REFERENCE_SCRAPE_FAILED,
    "PRIMARY_LLM_UNAVAILABLE": DegradationScenario.PRIMARY_MODEL_UNAVAILABLE,
    "VALIDATION_FAILS": DegradationScenario.VALIDATION_FAILED,
})

_missing = set(DegradationScenario) - set(STRATEGIES)
if _missing:
    raise RuntimeError(f"Degradation catalogue missing scenarios: {sorted(s.value for s in _missing)}")


def resolve_scenario(key: Union[DegradationScenario, str, None]) -> Optional[DegradationScenario]:
    """Map an enum member, kebab-case key or legacy name to a scenario."""
    if isinstance(key, DegradationScenario):
        return key
    if not isinstance(key, str):
        return None
    try:
        return DegradationScenario(key)
    except ValueError:
        return LEGACY_SCENARIO_KEYS.get(key)


def get_strategy(key: Union[DegradationScenario, str, None]) -> Optional[DegradationStrategy]:
    """Catalogue entry for a scenario key, or None if unknown."""
    scenario = resolve_scenario(key)
    if scenario is None:
        return None
    return STRATEGIES[scenario]


def list_strategies() -> list[DegradationStrategy]:
    """All catalogue entries in scenario declaration order."""
    return [STRATEGIES[scenario] for scenario in DegradationScenario]


def apply_degradation(
    key: Union[DegradationScenario, str, None],
    context: Optional[Mapping[str, Any]] = None,
) -> DegradationResult:
    """
    Apply the degradation strategy for a scenario.

    Unknown keys are reported in the result (applied=False), never raised.

    Args:
        key: Scenario key
        context: Caller execution context, echoed back in the result

    Returns:
        DegradationResult
    """
    echoed = dict(context) if context else {}
    strategy = get_strategy(key)

    if strategy is None:
        logger.warning("Unknown degradation scenario", scenario=str(key))
        return DegradationResult(
            applied=False,
            continue_workflow=False,
            context=echoed,
            error=UNKNOWN_SCENARIO,
        )

    logger.info(
        "Degradation applied",
        scenario=strategy.scenario.value,
        strategy=strategy.fallback_action.value,
        continue_workflow=strategy.continue_workflow,
    )
    return DegradationResult(
        applied=True,
        continue_workflow=strategy.continue_workflow,
        scenario=strategy.scenario,
        strategy=strategy.fallback_action,
        message=strategy.message,
        flag_for_review=strategy.flag_for_review,
        requires_manual_review=strategy.requires_manual_review,
        placeholder=strategy.placeholder,
        context=echoed,
    )
