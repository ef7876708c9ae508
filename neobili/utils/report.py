"""
Rendering helpers for assessment results
"""

from typing import Any, Dict, List

from ..core.guidelines.models import AssessmentResult


def result_to_dict(result: AssessmentResult) -> Dict[str, Any]:
    """Convert a result to a JSON-ready dict (camelCase keys)."""
    t = result.thresholds
    s = result.clinical_status
    d = result.threshold_differences
    g = result.clinical_guidance
    c = result.assessment_context

    guidance: Dict[str, Any] = {
        "immediateAction": g.immediate_action,
        "followUpRecommendation": g.follow_up_recommendation,
    }
    if g.discharge_considerations is not None:
        guidance["dischargeConsiderations"] = g.discharge_considerations

    return {
        "currentTSB": result.measured_bilirubin,
        "thresholds": {
            "phototherapy": t.phototherapy,
            "escalationOfCare": t.escalation_of_care,
            "exchangeTransfusion": t.exchange_transfusion,
            "transcutaneousBilirubinConfirmation": t.transcutaneous_confirmation,
        },
        "clinicalStatus": {
            "requiresPhototherapy": s.requires_phototherapy,
            "requiresIntensivePhototherapy": s.requires_intensive_phototherapy,
            "requiresExchangeTransfusion": s.requires_exchange_transfusion,
            "requiresSerumConfirmationForTcB": s.requires_serum_confirmation_for_tcb,
        },
        "thresholdDifferences": {
            "fromPhototherapy": d.from_phototherapy,
            "fromEscalationOfCare": d.from_escalation_of_care,
            "fromExchangeTransfusion": d.from_exchange_transfusion,
        },
        "clinicalGuidance": guidance,
        "assessmentContext": {
            "hasNeurotoxicityRiskFactors": c.has_neurotoxicity_risk_factors,
            "presentRiskFactors": list(c.present_risk_factors),
            "aapFigureUsed": c.aap_figure_used,
            "ageHours": c.age_hours,
            "gestationalAgeWeeks": c.gestational_age_weeks,
        },
    }


def format_report(result: AssessmentResult) -> str:
    """Human-readable summary of an assessment."""
    t = result.thresholds
    s = result.clinical_status
    g = result.clinical_guidance
    c = result.assessment_context

    def yes_no(flag: bool) -> str:
        return "YES" if flag else "NO"

    risk = ", ".join(c.present_risk_factors) if c.present_risk_factors else "none"
    lines: List[str] = [
        f"Patient: {c.gestational_age_weeks} weeks GA, {c.age_hours} hours old, "
        f"TSB {result.measured_bilirubin:.1f} mg/dL",
        f"Risk factors: {risk} (AAP Figure {c.aap_figure_used})",
        "",
        "Thresholds (mg/dL):",
        f"  Phototherapy:          {t.phototherapy:.1f}",
        f"  Escalation of care:    {t.escalation_of_care:.1f}",
        f"  Exchange transfusion:  {t.exchange_transfusion:.1f}",
        f"  TcB confirmation:      {t.transcutaneous_confirmation:.1f}",
        "",
        "Clinical status:",
        f"  Requires phototherapy:            {yes_no(s.requires_phototherapy)}",
        f"  Requires intensive phototherapy:  {yes_no(s.requires_intensive_phototherapy)}",
        f"  Requires exchange transfusion:    {yes_no(s.requires_exchange_transfusion)}",
        f"  Confirm TcB with serum:           {yes_no(s.requires_serum_confirmation_for_tcb)}",
        "",
        f"Clinical action: {g.immediate_action}",
        f"Follow-up: {g.follow_up_recommendation}",
    ]
    if g.discharge_considerations:
        lines.append(f"Discharge: {g.discharge_considerations}")
    for warning in result.warnings:
        lines.append(f"Warning: {warning}")
    return "\n".join(lines)
