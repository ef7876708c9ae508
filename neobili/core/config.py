"""
Configuration management for neobili
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any

from dotenv import load_dotenv


# Base paths
BASE_DIR = Path(__file__).parent.parent.parent
PACKAGE_DIR = Path(__file__).parent.parent
TABLES_DIR = PACKAGE_DIR / "core" / "guidelines" / "data"

load_dotenv(BASE_DIR / ".env")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


@dataclass(frozen=True)
class BilirubinSettings:
    """Immutable snapshot of the clinical constants used by one computation"""
    escalation_offset: float = 2.0       # mg/dL below exchange threshold
    tcb_offset: float = 2.0              # mg/dL below phototherapy threshold
    discharge_warning_hours: int = 24
    follow_up_age_hours: int = 72
    min_age_hours: int = 1
    max_age_hours: int = 336             # 14 days
    min_gestational_age_weeks: int = 35
    max_gestational_age_weeks: int = 42
    min_tsb: float = 0.0
    max_tsb: float = 30.0


class Config:
    """Main configuration class for neobili"""

    def __init__(self):
        # AAP 2022 hyperbilirubinemia constants
        self.bilirubin_config = {
            'escalation_offset': _env_float('NEOBILI_ESCALATION_OFFSET', 2.0),
            'tcb_offset': _env_float('NEOBILI_TCB_OFFSET', 2.0),
            'discharge_warning_hours': _env_int('NEOBILI_DISCHARGE_WARNING_HOURS', 24),
            'follow_up_age_hours': _env_int('NEOBILI_FOLLOW_UP_AGE_HOURS', 72),
            'min_age_hours': 1,
            'max_age_hours': 336,
            'min_gestational_age_weeks': 35,
            'max_gestational_age_weeks': 42,
            'min_tsb': 0.0,
            'max_tsb': 30.0,
        }

        # Reference tables (AAP 2022 supplemental tables 1-4)
        self.tables_config = {
            'tables_dir': Path(os.getenv('NEOBILI_TABLES_DIR', str(TABLES_DIR))),
            'files': {
                'phototherapy_no_risk': 'supplemental-table-1-phototherapy-no-risk.json',
                'phototherapy_with_risk': 'supplemental-table-2-phototherapy-with-risk.json',
                'exchange_no_risk': 'supplemental-table-3-exchange-no-risk.json',
                'exchange_with_risk': 'supplemental-table-4-exchange-with-risk.json',
            },
        }

        # Logging
        self.logging_config = {
            'level': os.getenv('LOG_LEVEL', 'INFO'),
            'format': '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        }

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get a configuration section by name"""
        config_map = {
            'bilirubin': self.bilirubin_config,
            'tables': self.tables_config,
            'logging': self.logging_config,
        }
        return config_map.get(section.lower(), {})

    def update_config(self, section: str, updates: Dict[str, Any]) -> None:
        """Update a configuration section"""
        if hasattr(self, f'{section}_config'):
            config = getattr(self, f'{section}_config')
            config.update(updates)
        else:
            raise ValueError(f"Unknown configuration section: {section}")

    def settings(self) -> BilirubinSettings:
        """Freeze the current clinical constants for a computation"""
        return BilirubinSettings(**self.bilirubin_config)


# Global configuration instance
config = Config()
