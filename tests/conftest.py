"""Test configuration and fixtures"""

import pytest

from neobili.core.config import BilirubinSettings
from neobili.core.guidelines.models import GABucket, ReferenceTable, TableKind
from neobili.core.guidelines.store import TableStore, get_default_store


@pytest.fixture
def store():
    """Store over the bundled AAP tables"""
    return get_default_store()


@pytest.fixture
def settings():
    return BilirubinSettings()


def make_bucket(plateau_hour=30, plateau_value=15.0, start=5.0, step=0.1, skip=()):
    """Linear bucket with hours 1..plateau_hour, minus any hours in `skip`."""
    values = {
        h: round(start + step * (h - 1), 1)
        for h in range(1, plateau_hour + 1)
        if h not in skip
    }
    return GABucket(
        description="synthetic",
        plateau_hour=plateau_hour,
        plateau_value=plateau_value,
        values=values,
    )


def make_table(kind, weeks=(35, 36, 37, 38), bucket_factory=None):
    bucket_factory = bucket_factory or (lambda week: make_bucket(start=float(week - 30)))
    return ReferenceTable(
        kind=kind,
        title=f"Synthetic {kind.value}",
        description="synthetic table",
        source="tests",
        units="mg/dL",
        buckets={week: bucket_factory(week) for week in weeks},
    )


@pytest.fixture
def table_factory():
    return make_table


@pytest.fixture
def synthetic_store():
    """Four small, well-formed tables"""
    return TableStore(tables={
        TableKind.PHOTOTHERAPY_NO_RISK: make_table(
            TableKind.PHOTOTHERAPY_NO_RISK, weeks=(35, 36, 37, 38, 39, 40)),
        TableKind.PHOTOTHERAPY_WITH_RISK: make_table(TableKind.PHOTOTHERAPY_WITH_RISK),
        TableKind.EXCHANGE_NO_RISK: make_table(
            TableKind.EXCHANGE_NO_RISK,
            bucket_factory=lambda week: make_bucket(plateau_value=25.0, start=float(week - 20))),
        TableKind.EXCHANGE_WITH_RISK: make_table(
            TableKind.EXCHANGE_WITH_RISK,
            bucket_factory=lambda week: make_bucket(plateau_value=22.0, start=float(week - 22))),
    })


@pytest.fixture
def bucket_factory():
    return make_bucket
