"""Gestational-age bucket resolution for the AAP reference tables."""

import math
from dataclasses import dataclass
from typing import Dict

from ..errors import UnresolvableKeyError
from .models import ReferenceTable, TableKind


@dataclass(frozen=True)
class GroupingRule:
    """All infants at or above `week` share the `week` curve."""
    week: int
    # Only applies when the table actually carries the grouped bucket
    requires_bucket: bool = False


# The published charts use wider bands at the top of the GA range:
# >=40 weeks for no-risk phototherapy, >=38 weeks for the other three.
GROUPINGS: Dict[TableKind, GroupingRule] = {
    TableKind.PHOTOTHERAPY_NO_RISK: GroupingRule(week=40, requires_bucket=True),
    TableKind.PHOTOTHERAPY_WITH_RISK: GroupingRule(week=38),
    TableKind.EXCHANGE_NO_RISK: GroupingRule(week=38),
    TableKind.EXCHANGE_WITH_RISK: GroupingRule(week=38),
}


def resolve_bucket_key(table: ReferenceTable, gestational_age_weeks: float) -> int:
    """
    Map a gestational age to the bucket key of `table`.

    Order: the table kind's grouping band, then the exact floored week,
    then clamping to the highest or lowest bucket.

    Raises:
        UnresolvableKeyError: the floored week falls between defined buckets
    """
    grouping = GROUPINGS[table.kind]
    if gestational_age_weeks >= grouping.week:
        if not grouping.requires_bucket or grouping.week in table.buckets:
            return grouping.week

    keys = table.bucket_keys
    if not keys:
        raise UnresolvableKeyError(
            f"Table '{table.kind.value}' has no gestational age buckets",
            details={"table": table.kind.value},
        )
    floored = math.floor(gestational_age_weeks)
    if floored in table.buckets:
        return floored
    if floored >= keys[-1]:
        return keys[-1]
    if floored <= keys[0]:
        return keys[0]

    raise UnresolvableKeyError(
        f"Unable to determine gestational age key for {gestational_age_weeks} "
        f"in table with keys: {', '.join(str(k) for k in keys)}",
        details={
            "gestational_age_weeks": gestational_age_weeks,
            "available_keys": list(keys),
            "table": table.kind.value,
        },
    )
