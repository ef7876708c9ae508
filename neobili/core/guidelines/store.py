"""
TableStore: loads and serves the four AAP 2022 reference tables.
Documents are validated once at load time and frozen; lookups never mutate them.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..config import TABLES_DIR, config
from ..errors import TableLoadError
from .models import GABucket, Intervention, ReferenceTable, TableKind

logger = logging.getLogger(__name__)


class BucketDocument(BaseModel):
    """JSON shape of one gestational-age entry"""
    description: str = Field(min_length=1)
    plateauHour: int = Field(ge=1)
    plateauValue: float
    values: Dict[int, float]

    @model_validator(mode="after")
    def _values_cover_plateau(self):
        missing = [h for h in range(1, self.plateauHour + 1) if h not in self.values]
        if missing:
            raise ValueError(
                f"values must cover hours 1..{self.plateauHour}; "
                f"missing {missing[:5]}{'...' if len(missing) > 5 else ''}"
            )
        return self


class ReferenceTableDocument(BaseModel):
    """JSON shape of an AAP supplemental table"""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    source: str = Field(min_length=1)
    units: Literal["mg/dL"]
    thresholds: Dict[int, BucketDocument] = Field(min_length=1)

    def to_table(self, kind: TableKind) -> ReferenceTable:
        buckets = {
            week: GABucket(
                description=b.description,
                plateau_hour=b.plateauHour,
                plateau_value=b.plateauValue,
                values=b.values,
            )
            for week, b in self.thresholds.items()
        }
        return ReferenceTable(
            kind=kind,
            title=self.title,
            description=self.description,
            source=self.source,
            units=self.units,
            buckets=buckets,
        )


def parse_reference_table(document: dict, kind: TableKind, table_name: str = "unknown") -> ReferenceTable:
    """Validate an already-decoded table document and freeze it."""
    try:
        parsed = ReferenceTableDocument.model_validate(document)
    except ValidationError as e:
        raise TableLoadError(
            f"Invalid table structure in '{table_name}': {e.error_count()} error(s)",
            table_name=table_name,
            details={"errors": [
                {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                for err in e.errors()
            ]},
        ) from e
    return parsed.to_table(kind)


def load_reference_table(path: Union[str, Path], kind: TableKind) -> ReferenceTable:
    """Load one reference table JSON file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except FileNotFoundError as e:
        raise TableLoadError(
            f"Failed to load AAP reference table '{path.stem}': Table not found",
            table_name=path.stem,
            details={"path": str(path)},
        ) from e
    except json.JSONDecodeError as e:
        raise TableLoadError(
            f"Failed to load AAP reference table '{path.stem}': {e}",
            table_name=path.stem,
            details={"path": str(path)},
        ) from e
    return parse_reference_table(document, kind, table_name=path.stem)


class TableStore:
    """
    Holds the four reference tables, addressable by TableKind.

    Either load from a directory with initialize(), or hand pre-parsed
    tables to the constructor (useful for tests and alternative datasets).
    """

    def __init__(
        self,
        tables_dir: Optional[Path] = None,
        tables: Optional[Dict[TableKind, ReferenceTable]] = None,
    ):
        self.tables_dir = Path(tables_dir) if tables_dir else config.tables_config['tables_dir']
        self._tables: Dict[TableKind, ReferenceTable] = dict(tables or {})
        self._loaded = tables is not None

    def initialize(self) -> None:
        """Load all four tables from tables_dir."""
        files = config.tables_config['files']
        self._tables = {
            kind: load_reference_table(self.tables_dir / files[kind.value], kind)
            for kind in TableKind
        }
        self._loaded = True
        logger.info(
            "TableStore loaded %d reference tables (%d GA buckets) from %s",
            len(self._tables),
            sum(len(t.buckets) for t in self._tables.values()),
            self.tables_dir,
        )
        if self.tables_dir.resolve() == TABLES_DIR.resolve():
            logger.warning(
                "Bundled reference tables are interpolated from the AAP figures, not the "
                "official supplemental tables; set NEOBILI_TABLES_DIR to load those"
            )

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get(self, kind: TableKind) -> ReferenceTable:
        if not self._loaded:
            self.initialize()
        try:
            return self._tables[kind]
        except KeyError:
            raise TableLoadError(
                f"Reference table '{kind.value}' is not loaded",
                table_name=kind.value,
            ) from None

    def pair(self, has_risk_factors: bool) -> Tuple[ReferenceTable, ReferenceTable]:
        """(phototherapy, exchange) tables for the given risk-factor presence"""
        by_intervention = {
            kind.intervention: self.get(kind)
            for kind in TableKind
            if kind.risk_adjusted == has_risk_factors
        }
        return (by_intervention[Intervention.PHOTOTHERAPY],
                by_intervention[Intervention.EXCHANGE_TRANSFUSION])


@lru_cache(maxsize=1)
def get_default_store() -> TableStore:
    """Process-wide store over the bundled tables, loaded on first use."""
    store = TableStore()
    store.initialize()
    return store
