"""
Main application entry point
Demonstrates how to use the neobili hyperbilirubinemia calculator

Usage:
  python main.py                                   # run example scenarios
  python main.py --ga 39 --age-hours 48 --tsb 10
  python main.py --ga 37 --age-hours 72 --tsb 15 --risk-factor "G6PD deficiency" --json
"""

import argparse
import json
import logging
import sys

from neobili.core.config import config
from neobili.core.engine import BilirubinAssessor
from neobili.core.errors import BilirubinCalculatorError
from neobili.core.guidelines.models import PatientAssessmentInput
from neobili.utils.report import format_report, result_to_dict


EXAMPLES = [
    ("Low-risk term infant",
     PatientAssessmentInput(gestational_age_weeks=39, age_hours=48, measured_bilirubin=10)),
    ("High-risk preterm infant (G6PD deficiency)",
     PatientAssessmentInput(gestational_age_weeks=37, age_hours=72, measured_bilirubin=15,
                            risk_factors=("G6PD deficiency",))),
    ("Critical case requiring intervention",
     PatientAssessmentInput(gestational_age_weeks=38, age_hours=24, measured_bilirubin=18)),
    ("Near-threshold infant in the first day of life",
     PatientAssessmentInput(gestational_age_weeks=38, age_hours=12, measured_bilirubin=9)),
    ("Gestational age below the validated range",
     PatientAssessmentInput(gestational_age_weeks=32, age_hours=48, measured_bilirubin=10)),
]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="AAP 2022 hyperbilirubinemia assessment")
    parser.add_argument("--ga", type=int, help="Gestational age in whole weeks (35-42)")
    parser.add_argument("--age-hours", type=int, help="Postnatal age in hours (1-336)")
    parser.add_argument("--tsb", type=float, help="Total serum bilirubin in mg/dL (0-30)")
    parser.add_argument("--risk-factor", action="append", default=[],
                        help="Neurotoxicity risk factor (repeatable)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser.parse_args(argv)


def run_examples(assessor: BilirubinAssessor) -> None:
    for i, (title, patient) in enumerate(EXAMPLES, 1):
        print("=" * 60)
        print(f"Example {i}: {title}")
        print("=" * 60)
        outcome = assessor.assess_outcome(patient)
        if outcome.ok:
            print(format_report(outcome.result))
        else:
            print(f"Rejected ({outcome.fault.kind.value}): {outcome.fault.message}")
        print()


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=config.logging_config['level'],
        format=config.logging_config['format'],
    )
    assessor = BilirubinAssessor()

    patient_args = (args.ga, args.age_hours, args.tsb)
    if all(a is None for a in patient_args):
        run_examples(assessor)
        return 0
    if any(a is None for a in patient_args):
        print("--ga, --age-hours and --tsb must be given together", file=sys.stderr)
        return 2

    patient = PatientAssessmentInput(
        gestational_age_weeks=args.ga,
        age_hours=args.age_hours,
        measured_bilirubin=args.tsb,
        risk_factors=tuple(args.risk_factor),
    )
    try:
        result = assessor.assess(patient)
    except BilirubinCalculatorError as e:
        if args.json:
            print(json.dumps(e.to_dict(), indent=2))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    else:
        print(format_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
