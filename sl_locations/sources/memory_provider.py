"""Record provider over data already held in memory."""
from typing import Any, Iterable, List, Mapping, Sequence
from sl_locations.core.config import CSV_COLUMNS
from sl_locations.core.exceptions import FormatError
from sl_locations.core.models import FlatRecord
from sl_locations.core.security import sanitize_location_name
from sl_locations.sources.base import RecordSource


def to_flat_record(row: Any) -> FlatRecord:
    """
    Coerce a row into a sanitized FlatRecord.

    Accepts a FlatRecord, a mapping keyed by the CSV column names, or a
    sequence of up to six values in column order (missing values are empty).
    """
    if isinstance(row, FlatRecord):
        values = [row.region, row.district, row.council, row.chiefdom, row.section, row.town]
    elif isinstance(row, Mapping):
        values = [row.get(column, "") for column in CSV_COLUMNS]
    elif isinstance(row, Sequence) and not isinstance(row, str):
        values = list(row[:len(CSV_COLUMNS)])
        values += [""] * (len(CSV_COLUMNS) - len(values))
    else:
        raise FormatError(f"Unsupported record type: {type(row).__name__}")

    return FlatRecord(*(sanitize_location_name(value) for value in values))


class InMemoryRecordSource(RecordSource):
    """Provider wrapping a sequence of rows."""

    def __init__(self, rows: Iterable[Any]):
        """
        Initialize in-memory provider.

        Args:
            rows: FlatRecords, column-keyed mappings or six-value sequences
        """
        self.rows = list(rows)

    def load_records(self) -> List[FlatRecord]:
        records = [to_flat_record(row) for row in self.rows]
        records = [r for r in records if r.region and r.town]
        if not records:
            raise FormatError("No records with both a region and a town name")
        return records

    def get_name(self) -> str:
        return "In-memory records"
