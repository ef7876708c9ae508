"""
Input pre-check for hyperbilirubinemia assessment.
Rejects patient parameters outside the AAP 2022 guideline's validated range
before any table lookup runs.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import BilirubinSettings, config
from .errors import InvalidInputError
from .guidelines.models import PatientAssessmentInput


class AssessmentRequest(BaseModel):
    """Raw assessment payload (dict, JSON or CLI arguments)."""
    model_config = ConfigDict(populate_by_name=True)

    gestational_age: int = Field(alias="gestationalAge")
    current_age_hours: int = Field(alias="currentAgeHours")
    current_tsb: float = Field(alias="currentTSB")
    risk_factors: List[str] = Field(default_factory=list, alias="riskFactors")

    def to_input(self) -> PatientAssessmentInput:
        return PatientAssessmentInput(
            gestational_age_weeks=self.gestational_age,
            age_hours=self.current_age_hours,
            measured_bilirubin=self.current_tsb,
            risk_factors=tuple(self.risk_factors),
        )


def validate_assessment_input(
    patient: PatientAssessmentInput,
    settings: Optional[BilirubinSettings] = None,
) -> None:
    """
    Validate input parameters for hyperbilirubinemia risk assessment.

    Raises:
        InvalidInputError: if any parameter is outside the acceptable clinical range
    """
    s = settings or config.settings()
    ga = patient.gestational_age_weeks
    age = patient.age_hours
    tsb = patient.measured_bilirubin

    if ga < s.min_gestational_age_weeks:
        raise InvalidInputError(
            f"Gestational age {ga} weeks is below the minimum of {s.min_gestational_age_weeks} weeks. "
            f"This calculator is only validated for infants >={s.min_gestational_age_weeks} weeks "
            f"gestational age per AAP guidelines.",
            parameter="gestational_age_weeks",
            details={
                "value": ga,
                "minimum": s.min_gestational_age_weeks,
                "suggestion": "For infants <35 weeks gestational age, consult NICU guidelines "
                              "or specialized preterm calculators",
            },
        )
    if ga > s.max_gestational_age_weeks:
        raise InvalidInputError(
            f"Gestational age {ga} weeks exceeds the maximum of {s.max_gestational_age_weeks} weeks. "
            f"Please verify the gestational age is correct.",
            parameter="gestational_age_weeks",
            details={
                "value": ga,
                "maximum": s.max_gestational_age_weeks,
                "suggestion": "Verify gestational age calculation or use alternative assessment "
                              "for post-term infants",
            },
        )

    if age < s.min_age_hours:
        raise InvalidInputError(
            f"Age {age} hours is below the minimum of {s.min_age_hours} hour. "
            f"Bilirubin assessment is typically not performed in the first hour of life.",
            parameter="age_hours",
            details={
                "value": age,
                "minimum": s.min_age_hours,
                "suggestion": "Wait until infant is at least 1 hour old for meaningful bilirubin assessment",
            },
        )
    if age > s.max_age_hours:
        raise InvalidInputError(
            f"Age of {age} hours exceeds AAP guideline maximum of {s.max_age_hours} hours (14 days). "
            f"This calculator is only validated for infants <=14 days old.",
            parameter="age_hours",
            details={
                "value": age,
                "maximum": s.max_age_hours,
                "suggestion": "For infants >14 days old, consult clinical guidelines or use "
                              "alternative assessment tools",
            },
        )

    if tsb < s.min_tsb:
        raise InvalidInputError(
            f"Total Serum Bilirubin (TSB) {tsb} mg/dL cannot be negative. "
            f"Please verify the laboratory result.",
            parameter="measured_bilirubin",
            details={
                "value": tsb,
                "minimum": s.min_tsb,
                "suggestion": "Verify laboratory result or check for transcription errors",
            },
        )
    if tsb > s.max_tsb:
        raise InvalidInputError(
            f"Total Serum Bilirubin (TSB) {tsb} mg/dL exceeds the clinical maximum of {s.max_tsb:g} mg/dL. "
            f"This level requires immediate medical attention and may indicate a laboratory error.",
            parameter="measured_bilirubin",
            details={
                "value": tsb,
                "maximum": s.max_tsb,
                "suggestion": "Immediately verify laboratory result and consider urgent clinical intervention",
            },
        )
