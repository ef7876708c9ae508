"""
Threshold Aggregator
Derives the four AAP clinical thresholds from the phototherapy and
exchange-transfusion reference tables.
"""

from typing import Optional

from .config import BilirubinSettings, config
from .guidelines.lookup import lookup_value
from .guidelines.models import DerivedThresholds
from .guidelines.store import TableStore, get_default_store


def derive_thresholds(
    gestational_age_weeks: float,
    age_hours: float,
    has_risk_factors: bool,
    store: Optional[TableStore] = None,
    settings: Optional[BilirubinSettings] = None,
) -> DerivedThresholds:
    """
    Calculate phototherapy, escalation, exchange and TcB thresholds.

    Args:
        gestational_age_weeks: Gestational age in weeks (35-42)
        age_hours: Postnatal age in hours (1-336)
        has_risk_factors: Any neurotoxicity risk factor present (selects Figure 3 tables)
        store: Reference tables; the bundled tables when omitted
        settings: Clinical constants; the global config when omitted

    Returns:
        DerivedThresholds in mg/dL
    """
    store = store or get_default_store()
    settings = settings or config.settings()

    phototherapy_table, exchange_table = store.pair(has_risk_factors)
    phototherapy = lookup_value(phototherapy_table, gestational_age_weeks, age_hours, settings)
    exchange = lookup_value(exchange_table, gestational_age_weeks, age_hours, settings)

    return DerivedThresholds(
        phototherapy=phototherapy,
        escalation_of_care=exchange - settings.escalation_offset,
        exchange_transfusion=exchange,
        transcutaneous_confirmation=phototherapy - settings.tcb_offset,
    )
