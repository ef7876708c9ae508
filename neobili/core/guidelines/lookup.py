"""Hour-specific threshold lookup with plateau and age clamping."""

import math
from typing import Optional

from ..config import BilirubinSettings, config
from ..errors import DataNotAvailableError
from .models import ReferenceTable
from .resolver import resolve_bucket_key


def clamp_age_hours(age_hours: float, settings: Optional[BilirubinSettings] = None) -> int:
    """Floor `age_hours` into the tables' domain (default 1..336)."""
    settings = settings or config.settings()
    return max(settings.min_age_hours, min(settings.max_age_hours, math.floor(age_hours)))


def lookup_value(
    table: ReferenceTable,
    gestational_age_weeks: float,
    age_hours: float,
    settings: Optional[BilirubinSettings] = None,
) -> float:
    """
    Threshold (mg/dL) from `table` for the given gestational age and age.

    Beyond the bucket's plateau hour the plateau value is returned.

    Raises:
        UnresolvableKeyError: no bucket key could be chosen
        DataNotAvailableError: the bucket or the exact hour is missing
    """
    key = resolve_bucket_key(table, gestational_age_weeks)
    bucket = table.buckets.get(key)
    if bucket is None:
        raise DataNotAvailableError(
            f"No threshold data found for gestational age {gestational_age_weeks} (key: {key})",
            details={"gestational_age_weeks": gestational_age_weeks, "key": key,
                     "table": table.kind.value},
        )

    hour = clamp_age_hours(age_hours, settings)
    if hour >= bucket.plateau_hour:
        return bucket.plateau_value

    value = bucket.values.get(hour)
    if value is None:
        raise DataNotAvailableError(
            f"No threshold value found for hour {hour} in GA {key}",
            details={"hour": hour, "key": key, "table": table.kind.value},
        )
    return value
