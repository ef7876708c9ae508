"""
Assessment Engine - Combines threshold derivation, clinical status and guidance
into a single AAP 2022 hyperbilirubinemia assessment
"""

import logging
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from .config import BilirubinSettings, config
from .errors import AssessmentOutcome, BilirubinCalculatorError, Fault, FaultKind
from .guidance import FALLBACK_RULE, match_guidance
from .guidelines.models import (
    AssessmentContext,
    AssessmentResult,
    PatientAssessmentInput,
)
from .guidelines.store import TableStore, get_default_store
from .status import compute_differences, evaluate_status
from .thresholds import derive_thresholds
from .validation import AssessmentRequest, validate_assessment_input

logger = logging.getLogger(__name__)

FIGURE_NO_RISK = 2
FIGURE_WITH_RISK = 3


class BilirubinAssessor:
    """
    Runs the full assessment pipeline for one TSB measurement:
    thresholds -> clinical status -> guidance -> assembled result.
    """

    def __init__(
        self,
        store: Optional[TableStore] = None,
        settings: Optional[BilirubinSettings] = None,
        validate: bool = True,
    ):
        self.store = store
        self.settings = settings
        self.validate = validate

    def _store(self) -> TableStore:
        return self.store or get_default_store()

    def _settings(self) -> BilirubinSettings:
        return self.settings or config.settings()

    def assess(self, patient: PatientAssessmentInput) -> AssessmentResult:
        """
        Complete hyperbilirubinemia risk assessment.

        Raises:
            InvalidInputError: parameters outside the validated range (when validate=True)
            DataNotAvailableError, UnresolvableKeyError: reference data faults
        """
        settings = self._settings()
        if self.validate:
            validate_assessment_input(patient, settings)

        has_risk = patient.has_risk_factors
        thresholds = derive_thresholds(
            patient.gestational_age_weeks,
            patient.age_hours,
            has_risk,
            store=self._store(),
            settings=settings,
        )
        measured = patient.measured_bilirubin
        guidance = match_guidance(measured, thresholds, patient.age_hours, settings)

        warnings = ()
        if guidance.follow_up_rule_id == FALLBACK_RULE.id:
            warnings = ("No follow-up rule matched; generic recommendation returned",)

        return AssessmentResult(
            measured_bilirubin=measured,
            thresholds=thresholds,
            clinical_status=evaluate_status(measured, thresholds),
            threshold_differences=compute_differences(measured, thresholds),
            clinical_guidance=guidance,
            assessment_context=AssessmentContext(
                has_neurotoxicity_risk_factors=has_risk,
                present_risk_factors=patient.risk_factors,
                aap_figure_used=FIGURE_WITH_RISK if has_risk else FIGURE_NO_RISK,
                age_hours=patient.age_hours,
                gestational_age_weeks=patient.gestational_age_weeks,
            ),
            warnings=warnings,
        )

    def assess_outcome(self, patient: PatientAssessmentInput) -> AssessmentOutcome:
        """Like assess(), but faults come back as values instead of exceptions."""
        try:
            return AssessmentOutcome(result=self.assess(patient))
        except BilirubinCalculatorError as e:
            logger.error("Assessment failed (%s): %s", e.code, e.message)
            return AssessmentOutcome(fault=Fault.from_error(e))


_default_assessor = BilirubinAssessor()


def assess(
    gestational_age_weeks: int,
    age_hours: int,
    measured_bilirubin: float,
    risk_factors: Iterable[str] = (),
) -> AssessmentResult:
    """Assess one measurement with the bundled tables and global config."""
    return _default_assessor.assess(
        PatientAssessmentInput(
            gestational_age_weeks=gestational_age_weeks,
            age_hours=age_hours,
            measured_bilirubin=measured_bilirubin,
            risk_factors=risk_factors,
        )
    )


def assess_payload(payload: Dict[str, Any]) -> AssessmentOutcome:
    """Parse a raw request payload and assess it without raising."""
    try:
        request = AssessmentRequest.model_validate(payload)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        return AssessmentOutcome(fault=Fault(
            kind=FaultKind.INVALID_INPUT,
            message=f"Malformed assessment request: {e.error_count()} error(s)",
            details={"fields": fields},
        ))
    return _default_assessor.assess_outcome(request.to_input())
