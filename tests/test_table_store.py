"""Tests for the reference table store and JSON loader."""

import json
import logging
import shutil

import pytest

from neobili.core.config import TABLES_DIR, config
from neobili.core.errors import TableLoadError
from neobili.core.guidelines.models import TableKind
from neobili.core.guidelines.store import (
    TableStore,
    load_reference_table,
    parse_reference_table,
)


def _document(units="mg/dL", plateau_hour=4, hours=(1, 2, 3, 4)):
    return {
        "title": "Test Table",
        "description": "A table",
        "source": "tests",
        "units": units,
        "thresholds": {
            "35": {
                "description": "35 weeks gestation",
                "plateauHour": plateau_hour,
                "plateauValue": 12.0,
                "values": {str(h): 10.0 + h / 10 for h in hours},
            }
        },
    }


# ------------------------------------------------------------------
# Initialization
# ------------------------------------------------------------------

class TestInitialization:
    def test_loads_all_four_tables(self, store):
        for kind in TableKind:
            assert store.get(kind).kind is kind

    def test_is_loaded_flag(self, store):
        assert store.is_loaded is True

    def test_units_fixed(self, store):
        assert {store.get(k).units for k in TableKind} == {"mg/dL"}

    def test_bucket_keys(self, store):
        assert store.get(TableKind.PHOTOTHERAPY_NO_RISK).bucket_keys == (35, 36, 37, 38, 39, 40)
        for kind in (TableKind.PHOTOTHERAPY_WITH_RISK,
                     TableKind.EXCHANGE_NO_RISK,
                     TableKind.EXCHANGE_WITH_RISK):
            assert store.get(kind).bucket_keys == (35, 36, 37, 38)

    def test_every_bucket_covers_plateau(self, store):
        for kind in TableKind:
            for week, bucket in store.get(kind).buckets.items():
                assert bucket.plateau_hour >= 1
                missing = [h for h in range(1, bucket.plateau_hour + 1) if h not in bucket.values]
                assert missing == [], f"{kind.value} GA {week}"

    def test_uninitialized_store_loads_on_first_get(self):
        s = TableStore()
        assert s.is_loaded is False
        table = s.get(TableKind.EXCHANGE_NO_RISK)
        assert s.is_loaded is True
        assert table.kind is TableKind.EXCHANGE_NO_RISK

    def test_bundled_tables_marked_approximate(self, store):
        for kind in TableKind:
            table = store.get(kind)
            assert table.title.startswith("Approximation of Supplemental Table")
            assert "interpolated" in table.description

    def test_bundled_tables_log_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="neobili.core.guidelines.store"):
            TableStore(tables_dir=TABLES_DIR).initialize()
        assert "NEOBILI_TABLES_DIR" in caplog.text

    def test_override_directory_does_not_warn(self, tmp_path, caplog):
        for name in config.tables_config['files'].values():
            shutil.copy(TABLES_DIR / name, tmp_path / name)
        with caplog.at_level(logging.WARNING, logger="neobili.core.guidelines.store"):
            TableStore(tables_dir=tmp_path).initialize()
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_tables_are_read_only(self, store):
        table = store.get(TableKind.PHOTOTHERAPY_NO_RISK)
        with pytest.raises(TypeError):
            table.buckets[41] = table.buckets[40]
        with pytest.raises(TypeError):
            table.buckets[40].values[1] = 0.0


# ------------------------------------------------------------------
# Table pairs
# ------------------------------------------------------------------

class TestPair:
    def test_no_risk_pair(self, store):
        photo, exchange = store.pair(False)
        assert photo.kind is TableKind.PHOTOTHERAPY_NO_RISK
        assert exchange.kind is TableKind.EXCHANGE_NO_RISK

    def test_with_risk_pair(self, store):
        photo, exchange = store.pair(True)
        assert photo.kind is TableKind.PHOTOTHERAPY_WITH_RISK
        assert exchange.kind is TableKind.EXCHANGE_WITH_RISK

    def test_missing_table_in_partial_store(self, table_factory):
        s = TableStore(tables={
            TableKind.PHOTOTHERAPY_NO_RISK: table_factory(TableKind.PHOTOTHERAPY_NO_RISK),
        })
        with pytest.raises(TableLoadError):
            s.pair(False)


# ------------------------------------------------------------------
# Document validation
# ------------------------------------------------------------------

class TestDocumentValidation:
    def test_valid_document(self):
        table = parse_reference_table(_document(), TableKind.EXCHANGE_NO_RISK)
        bucket = table.buckets[35]
        assert bucket.plateau_hour == 4
        assert bucket.values[2] == pytest.approx(10.2)

    def test_wrong_units_rejected(self):
        with pytest.raises(TableLoadError) as exc:
            parse_reference_table(_document(units="umol/L"), TableKind.EXCHANGE_NO_RISK, "bad-units")
        assert exc.value.table_name == "bad-units"

    def test_values_must_reach_plateau(self):
        with pytest.raises(TableLoadError) as exc:
            parse_reference_table(_document(plateau_hour=6), TableKind.EXCHANGE_NO_RISK)
        assert any("values" in e["msg"] or "1..6" in e["msg"] for e in exc.value.details["errors"])

    def test_gap_below_plateau_rejected(self):
        with pytest.raises(TableLoadError):
            parse_reference_table(_document(hours=(1, 2, 4)), TableKind.EXCHANGE_NO_RISK)

    def test_missing_field_rejected(self):
        doc = _document()
        del doc["source"]
        with pytest.raises(TableLoadError):
            parse_reference_table(doc, TableKind.EXCHANGE_NO_RISK)

    def test_plateau_hour_must_be_positive(self):
        with pytest.raises(TableLoadError):
            parse_reference_table(_document(plateau_hour=0), TableKind.EXCHANGE_NO_RISK)


# ------------------------------------------------------------------
# File loading
# ------------------------------------------------------------------

class TestFileLoading:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "table.json"
        path.write_text(json.dumps(_document()), encoding="utf-8")
        table = load_reference_table(path, TableKind.PHOTOTHERAPY_WITH_RISK)
        assert table.kind is TableKind.PHOTOTHERAPY_WITH_RISK
        assert table.title == "Test Table"

    def test_missing_file(self, tmp_path):
        with pytest.raises(TableLoadError) as exc:
            load_reference_table(tmp_path / "nope.json", TableKind.EXCHANGE_NO_RISK)
        assert exc.value.code == "TABLE_LOAD_ERROR"
        assert "not found" in exc.value.message

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(TableLoadError):
            load_reference_table(path, TableKind.EXCHANGE_NO_RISK)

    def test_store_from_empty_directory(self, tmp_path):
        s = TableStore(tables_dir=tmp_path)
        with pytest.raises(TableLoadError):
            s.initialize()
        assert s.is_loaded is False
