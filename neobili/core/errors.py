"""
Custom Exception Hierarchy

Fault types raised by the threshold engine, plus the outcome value used by
callers that prefer not to unwind on a failed assessment.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class FaultKind(Enum):
    """Enumerated fault kinds an assessment can end in"""
    DATA_NOT_AVAILABLE = "DATA_NOT_AVAILABLE"  # table lacks an expected bucket/hour
    UNRESOLVABLE_KEY = "UNRESOLVABLE_KEY"      # no gestational-age bucket could be chosen
    INVALID_INPUT = "INVALID_INPUT"            # patient parameters outside validated range
    TABLE_LOAD_ERROR = "TABLE_LOAD_ERROR"      # reference document malformed or missing


class BilirubinCalculatorError(Exception):
    """Base exception for all calculator errors."""

    kind: Optional[FaultKind] = None

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a plain dictionary."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class DataNotAvailableError(BilirubinCalculatorError):
    """A reference table is missing a bucket or hour the lookup expected."""

    kind = FaultKind.DATA_NOT_AVAILABLE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=self.kind.value, details=details)


class UnresolvableKeyError(BilirubinCalculatorError):
    """Gestational-age key resolution exhausted every rule."""

    kind = FaultKind.UNRESOLVABLE_KEY

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=self.kind.value, details=details)


class InvalidInputError(BilirubinCalculatorError):
    """Patient parameters fall outside the guideline's validated range."""

    kind = FaultKind.INVALID_INPUT

    def __init__(
        self,
        message: str,
        parameter: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code=self.kind.value,
            details={"parameter": parameter, **(details or {})}
        )
        self.parameter = parameter


class TableLoadError(BilirubinCalculatorError):
    """A reference table document could not be read or failed validation."""

    kind = FaultKind.TABLE_LOAD_ERROR

    def __init__(
        self,
        message: str,
        table_name: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code=self.kind.value,
            details={"table_name": table_name, **(details or {})}
        )
        self.table_name = table_name


@dataclass(frozen=True)
class Fault:
    """A fatal assessment fault expressed as a value"""
    kind: FaultKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, error: BilirubinCalculatorError) -> "Fault":
        return cls(kind=error.kind, message=error.message, details=dict(error.details))


@dataclass(frozen=True)
class AssessmentOutcome:
    """Either a completed assessment or the fault that stopped it"""
    result: Optional[Any] = None
    fault: Optional[Fault] = None

    @property
    def ok(self) -> bool:
        return self.fault is None

    def unwrap(self) -> Any:
        """Return the result, re-raising the fault as an exception."""
        if self.fault is not None:
            raise ERROR_TYPES[self.fault.kind](self.fault.message, details=self.fault.details)
        return self.result


ERROR_TYPES = {
    FaultKind.DATA_NOT_AVAILABLE: DataNotAvailableError,
    FaultKind.UNRESOLVABLE_KEY: UnresolvableKeyError,
    FaultKind.INVALID_INPUT: InvalidInputError,
    FaultKind.TABLE_LOAD_ERROR: TableLoadError,
}
