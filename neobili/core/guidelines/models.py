"""Data models for AAP 2022 hyperbilirubinemia reference tables and assessments."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class Intervention(Enum):
    PHOTOTHERAPY = "phototherapy"
    EXCHANGE_TRANSFUSION = "exchange_transfusion"


class TableKind(Enum):
    """The four AAP reference tables (intervention x risk-factor presence)"""
    PHOTOTHERAPY_NO_RISK = "phototherapy_no_risk"
    PHOTOTHERAPY_WITH_RISK = "phototherapy_with_risk"
    EXCHANGE_NO_RISK = "exchange_no_risk"
    EXCHANGE_WITH_RISK = "exchange_with_risk"

    @property
    def intervention(self) -> Intervention:
        if self in (TableKind.PHOTOTHERAPY_NO_RISK, TableKind.PHOTOTHERAPY_WITH_RISK):
            return Intervention.PHOTOTHERAPY
        return Intervention.EXCHANGE_TRANSFUSION

    @property
    def risk_adjusted(self) -> bool:
        return self in (TableKind.PHOTOTHERAPY_WITH_RISK, TableKind.EXCHANGE_WITH_RISK)


class NeurotoxicityRiskFactor(Enum):
    """AAP 2022 Table 2. GA <38 weeks is excluded: the curves account for it."""
    ALBUMIN_LOW = "Serum albumin <3.0 g/dL"
    ISOIMMUNE_HEMOLYTIC_DISEASE = "Isoimmune hemolytic disease (positive DAT)"
    G6PD_DEFICIENCY = "G6PD deficiency"
    OTHER_HEMOLYTIC_CONDITIONS = "Other hemolytic conditions"
    SEPSIS = "Sepsis"
    CLINICAL_INSTABILITY = "Significant clinical instability in the previous 24 hours"


@dataclass(frozen=True)
class GABucket:
    """Hour-indexed thresholds for one gestational-age group."""
    description: str
    plateau_hour: int
    plateau_value: float
    values: Mapping[int, float]

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))


@dataclass(frozen=True)
class ReferenceTable:
    """One AAP supplemental table, keyed by gestational-age bucket (weeks)."""
    kind: TableKind
    title: str
    description: str
    source: str
    units: str
    buckets: Mapping[int, GABucket]

    def __post_init__(self):
        object.__setattr__(self, "buckets", MappingProxyType(dict(self.buckets)))

    @property
    def bucket_keys(self) -> Tuple[int, ...]:
        return tuple(sorted(self.buckets))


@dataclass(frozen=True)
class PatientAssessmentInput:
    """Already range-checked patient parameters"""
    gestational_age_weeks: int
    age_hours: int
    measured_bilirubin: float  # TSB, mg/dL
    risk_factors: Tuple[str, ...] = ()

    def __post_init__(self):
        factors = self.risk_factors
        if isinstance(factors, (str, NeurotoxicityRiskFactor)):
            factors = (factors,)
        object.__setattr__(self, "risk_factors", tuple(
            f.value if isinstance(f, NeurotoxicityRiskFactor) else f for f in factors
        ))

    @property
    def has_risk_factors(self) -> bool:
        return len(self.risk_factors) > 0


@dataclass(frozen=True)
class DerivedThresholds:
    phototherapy: float
    escalation_of_care: float            # exchange - escalation offset
    exchange_transfusion: float
    transcutaneous_confirmation: float   # phototherapy - TcB offset


@dataclass(frozen=True)
class ClinicalStatus:
    requires_phototherapy: bool
    requires_intensive_phototherapy: bool
    requires_exchange_transfusion: bool
    requires_serum_confirmation_for_tcb: bool


@dataclass(frozen=True)
class ThresholdDifferences:
    """TSB minus threshold: negative below, positive above."""
    from_phototherapy: float
    from_escalation_of_care: float
    from_exchange_transfusion: float


@dataclass(frozen=True)
class GuidanceRule:
    """A follow-up band: gap in (lower, upper], age in [age_lower, age_upper)."""
    id: str
    difference_lower: float
    difference_upper: float
    recommendation: str
    age_lower_hours: Optional[float] = None
    age_upper_hours: Optional[float] = None
    notes: str = ""

    def matches(self, gap: float, age_hours: float) -> bool:
        if not (self.difference_lower < gap <= self.difference_upper):
            return False
        if self.age_lower_hours is not None and age_hours < self.age_lower_hours:
            return False
        if self.age_upper_hours is not None and age_hours >= self.age_upper_hours:
            return False
        return True


@dataclass(frozen=True)
class ClinicalGuidance:
    immediate_action: str
    follow_up_recommendation: str
    discharge_considerations: Optional[str] = None
    follow_up_rule_id: str = ""


@dataclass(frozen=True)
class AssessmentContext:
    has_neurotoxicity_risk_factors: bool
    present_risk_factors: Tuple[str, ...]
    aap_figure_used: int  # 2 without risk factors, 3 with
    age_hours: int
    gestational_age_weeks: int


@dataclass(frozen=True)
class AssessmentResult:
    """Full hyperbilirubinemia assessment for a single TSB measurement."""
    measured_bilirubin: float
    thresholds: DerivedThresholds
    clinical_status: ClinicalStatus
    threshold_differences: ThresholdDifferences
    clinical_guidance: ClinicalGuidance
    assessment_context: AssessmentContext
    warnings: Tuple[str, ...] = field(default_factory=tuple)
