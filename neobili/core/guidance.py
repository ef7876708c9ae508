"""
Guidance Rule Matcher
Picks the immediate action from the threshold ladder and the follow-up
recommendation from the AAP Figure 7 rule catalog.
"""

import logging
from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import BilirubinSettings, config
from .guidelines.data.follow_up import (
    FALLBACK_RULE,
    PHOTOTHERAPY_INDICATED_RULE,
    build_follow_up_rules,
)
from .guidelines.models import ClinicalGuidance, DerivedThresholds, GuidanceRule

logger = logging.getLogger(__name__)

ACTION_EXCHANGE = "Begin exchange transfusion"
ACTION_ESCALATION = "Begin intensive phototherapy and prepare for exchange transfusion"
ACTION_PHOTOTHERAPY = "Begin phototherapy"
ACTION_NONE = "No phototherapy required"

FOLLOW_UP_SEE_ACTION = "Phototherapy indicated - see clinical action"

# Table values carry one decimal; gaps are snapped so band edges compare exactly
GAP_PRECISION = 6


class FallbackMonitor:
    """Counts follow-up lookups that matched no catalog band, keyed by (gap, age_hours)."""

    def __init__(self):
        self.counts: Counter = Counter()

    def record(self, gap: float, age_hours: float) -> None:
        self.counts[(round(gap, 2), age_hours)] += 1
        logger.warning(
            "No follow-up rule matched gap=%.2f mg/dL at %s hours; using fallback (%d so far)",
            gap, age_hours, self.total,
        )

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def reset(self) -> None:
        self.counts.clear()


fallback_monitor = FallbackMonitor()


def _rules_for(settings: BilirubinSettings) -> Tuple[GuidanceRule, ...]:
    return build_follow_up_rules(settings.discharge_warning_hours, settings.follow_up_age_hours)


def determine_immediate_action(measured: float, thresholds: DerivedThresholds) -> str:
    if measured >= thresholds.exchange_transfusion:
        return ACTION_EXCHANGE
    elif measured >= thresholds.escalation_of_care:
        return ACTION_ESCALATION
    elif measured >= thresholds.phototherapy:
        return ACTION_PHOTOTHERAPY
    else:
        return ACTION_NONE


def find_follow_up_rule(
    gap: float,
    age_hours: float,
    rules: Optional[Sequence[GuidanceRule]] = None,
    monitor: Optional[FallbackMonitor] = None,
) -> GuidanceRule:
    """
    First rule in catalog order whose band and age window contain the inputs.

    Args:
        gap: How far (mg/dL) TSB sits below the phototherapy threshold
        age_hours: Postnatal age in hours
        rules: Catalog to scan; the default AAP Figure 7 catalog when omitted
        monitor: Where unmatched lookups are counted

    Returns:
        The matching rule, the phototherapy-indicated sentinel for gap <= 0,
        or the fallback rule when nothing matches
    """
    gap = round(gap, GAP_PRECISION)
    if gap <= 0:
        return PHOTOTHERAPY_INDICATED_RULE

    if rules is None:
        rules = _rules_for(config.settings())

    for rule in rules:
        if rule.matches(gap, age_hours):
            return rule

    (monitor or fallback_monitor).record(gap, age_hours)
    return FALLBACK_RULE


def match_guidance(
    measured: float,
    thresholds: DerivedThresholds,
    age_hours: float,
    settings: Optional[BilirubinSettings] = None,
) -> ClinicalGuidance:
    """Immediate action, follow-up and (first day of life only) discharge caveat."""
    settings = settings or config.settings()
    gap = round(thresholds.phototherapy - measured, GAP_PRECISION)

    if measured >= thresholds.phototherapy:
        follow_up = FOLLOW_UP_SEE_ACTION
        rule_id = PHOTOTHERAPY_INDICATED_RULE.id
    else:
        rule = find_follow_up_rule(gap, age_hours, _rules_for(settings))
        follow_up = rule.recommendation
        rule_id = rule.id

    discharge = None
    if age_hours < settings.discharge_warning_hours and gap < settings.tcb_offset:
        discharge = (
            f"Consider delaying discharge for infants <{settings.discharge_warning_hours} "
            f"hours old when TSB is within {settings.tcb_offset:g} mg/dL of phototherapy threshold"
        )

    return ClinicalGuidance(
        immediate_action=determine_immediate_action(measured, thresholds),
        follow_up_recommendation=follow_up,
        discharge_considerations=discharge,
        follow_up_rule_id=rule_id,
    )


def catalog_gaps(
    rules: Sequence[GuidanceRule],
    gaps: Iterable[float],
    ages: Iterable[float],
) -> List[Tuple[float, float, int]]:
    """
    Sample points not covered by exactly one rule.

    Returns (gap, age_hours, match_count) for every combination where the
    number of matching rules is not 1.
    """
    ages = list(ages)
    problems = []
    for gap in gaps:
        for age in ages:
            count = sum(1 for rule in rules if rule.matches(gap, age))
            if count != 1:
                problems.append((gap, age, count))
    return problems
