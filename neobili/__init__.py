"""neobili: AAP 2022 newborn hyperbilirubinemia thresholds and guidance"""

from .core.engine import BilirubinAssessor, assess
from .core.guidelines.models import AssessmentResult, PatientAssessmentInput

__all__ = ["BilirubinAssessor", "assess", "AssessmentResult", "PatientAssessmentInput"]
