"""Clinical status flags and threshold differences for a TSB measurement."""

from .guidelines.models import ClinicalStatus, DerivedThresholds, ThresholdDifferences


def evaluate_status(measured: float, thresholds: DerivedThresholds) -> ClinicalStatus:
    # Inclusive: a TSB exactly at a threshold requires the intervention
    return ClinicalStatus(
        requires_phototherapy=measured >= thresholds.phototherapy,
        requires_intensive_phototherapy=measured >= thresholds.escalation_of_care,
        requires_exchange_transfusion=measured >= thresholds.exchange_transfusion,
        requires_serum_confirmation_for_tcb=measured >= thresholds.transcutaneous_confirmation,
    )


def compute_differences(measured: float, thresholds: DerivedThresholds) -> ThresholdDifferences:
    return ThresholdDifferences(
        from_phototherapy=measured - thresholds.phototherapy,
        from_escalation_of_care=measured - thresholds.escalation_of_care,
        from_exchange_transfusion=measured - thresholds.exchange_transfusion,
    )
