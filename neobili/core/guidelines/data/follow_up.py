"""
AAP 2022 Figure 7: follow-up after a TSB below the phototherapy threshold.
Bands are keyed on how far (mg/dL) the TSB sits below the threshold; some
bands split on postnatal age. Catalog order is match order.
Source: Kemper AR, et al. Pediatrics. 2022;150(3):e2022058859.
"""

from functools import lru_cache
from typing import Tuple

from ..models import GuidanceRule

DISCHARGE_WARNING_HOURS = 24
FOLLOW_UP_AGE_HOURS = 72


@lru_cache(maxsize=8)
def build_follow_up_rules(
    discharge_warning_hours: int = DISCHARGE_WARNING_HOURS,
    follow_up_age_hours: int = FOLLOW_UP_AGE_HOURS,
) -> Tuple[GuidanceRule, ...]:
    return (
        # 0.1 - 2.0 mg/dL below threshold
        GuidanceRule(
            id="rule_1a",
            difference_lower=0.1,
            difference_upper=2.0,
            age_upper_hours=discharge_warning_hours,
            recommendation="Delay discharge, consider phototherapy, measure TSB in 4 to 8 hours",
            notes=f"For infants < {discharge_warning_hours} hours old who are very close to phototherapy threshold",
        ),
        GuidanceRule(
            id="rule_1b",
            difference_lower=0.1,
            difference_upper=2.0,
            age_lower_hours=discharge_warning_hours,
            recommendation=(
                "Measure TSB in 4 to 24 hours. Options: delay discharge and consider "
                "phototherapy, discharge with home phototherapy if eligible, or discharge "
                "without phototherapy but with close follow-up"
            ),
            notes=f"For infants >= {discharge_warning_hours} hours old who are very close to phototherapy threshold",
        ),
        # 2.0 - 3.5 mg/dL below threshold
        GuidanceRule(
            id="rule_2",
            difference_lower=2.0,
            difference_upper=3.5,
            recommendation="TSB or TcB in 4 to 24 hours",
            notes="Moderate risk zone requiring prompt follow-up",
        ),
        # 3.5 - 5.5 mg/dL below threshold
        GuidanceRule(
            id="rule_3",
            difference_lower=3.5,
            difference_upper=5.5,
            recommendation="TSB or TcB in 1-2 days",
            notes="Lower risk zone with standard follow-up timing",
        ),
        # 5.5 - 7.0 mg/dL below threshold
        GuidanceRule(
            id="rule_4a",
            difference_lower=5.5,
            difference_upper=7.0,
            age_upper_hours=follow_up_age_hours,
            recommendation="Follow-up within 2 days; TcB or TSB according to clinical judgment",
            notes=f"For younger infants (< {follow_up_age_hours} hours) in the low risk zone",
        ),
        GuidanceRule(
            id="rule_4b",
            difference_lower=5.5,
            difference_upper=7.0,
            age_lower_hours=follow_up_age_hours,
            recommendation="Clinical judgment",
            notes=f"For older infants (>= {follow_up_age_hours} hours) in the low risk zone",
        ),
        # > 7.0 mg/dL below threshold
        GuidanceRule(
            id="rule_5a",
            difference_lower=7.0,
            difference_upper=float("inf"),
            age_upper_hours=follow_up_age_hours,
            recommendation="Follow-up within 3 days; TcB or TSB according to clinical judgment",
            notes=f"For younger infants (< {follow_up_age_hours} hours) in the very low risk zone",
        ),
        GuidanceRule(
            id="rule_5b",
            difference_lower=7.0,
            difference_upper=float("inf"),
            age_lower_hours=follow_up_age_hours,
            recommendation="Clinical judgment",
            notes=f"For older infants (>= {follow_up_age_hours} hours) in the very low risk zone",
        ),
    )


FOLLOW_UP_RULES = build_follow_up_rules()

# TSB at or above the phototherapy threshold; the caller short-circuits
# before matching, so this is a sentinel for gap <= 0.
PHOTOTHERAPY_INDICATED_RULE = GuidanceRule(
    id="rule_negative",
    difference_lower=float("-inf"),
    difference_upper=0.0,
    recommendation="TSB exceeds phototherapy threshold - phototherapy is indicated",
    notes="When TSB is at or above the phototherapy threshold",
)

FALLBACK_RULE = GuidanceRule(
    id="rule_fallback",
    difference_lower=0.0,
    difference_upper=float("inf"),
    recommendation="Clinical judgment - consult AAP guidelines",
    notes="No specific rule found for this combination",
)
