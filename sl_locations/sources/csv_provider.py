"""CSV-based provider for the location table."""
import io
import pandas as pd
from pathlib import Path
from typing import List, Optional
from sl_locations.core.config import CSV_COLUMNS, LOCATIONS_CSV_PATH
from sl_locations.core.exceptions import FormatError
from sl_locations.core.models import FlatRecord
from sl_locations.sources.base import RecordSource
from sl_locations.sources.memory_provider import to_flat_record
from sl_locations.utils.timing import Timer


class CSVRecordSource(RecordSource):
    """
    Provider reading the idregion/iddistrict/idcouncil/idchiefdom/idsection/idtown table.

    Rows without a region or a town are dropped.
    """

    def __init__(self, csv_path: Optional[Path] = None, csv_text: Optional[str] = None):
        """
        Initialize CSV provider.

        Args:
            csv_path: Path to CSV file (defaults to LOCATIONS_CSV_PATH)
            csv_text: CSV content given directly; takes precedence over csv_path
        """
        self.csv_path = Path(csv_path) if csv_path else LOCATIONS_CSV_PATH
        self.csv_text = csv_text

    def _read_frame(self) -> pd.DataFrame:
        if self.csv_text is not None:
            if not self.csv_text.strip():
                raise FormatError("CSV data is empty")
            source = io.StringIO(self.csv_text.strip())
        else:
            if not self.csv_path.exists():
                raise FormatError(f"CSV file not found: {self.csv_path}")
            source = self.csv_path

        try:
            df = pd.read_csv(
                source,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
            )
        except pd.errors.EmptyDataError as e:
            raise FormatError("CSV data is empty") from e
        except pd.errors.ParserError as e:
            raise FormatError(f"Malformed CSV data: {e}") from e

        df.columns = [str(column).strip().lower() for column in df.columns]
        missing = [column for column in CSV_COLUMNS if column not in df.columns]
        if missing:
            raise FormatError(f"Missing required headers: {', '.join(missing)}")
        return df[CSV_COLUMNS]

    def load_records(self) -> List[FlatRecord]:
        with Timer("load_csv_records", source=self.get_name()) as timer:
            df = self._read_frame()
            records = [to_flat_record(row) for row in df.itertuples(index=False, name=None)]
            records = [r for r in records if r.region and r.town]
            timer.add(rows=len(df), records=len(records))

        if not records:
            raise FormatError("CSV contains no rows with both a region and a town name")
        return records

    def get_name(self) -> str:
        return "CSV locations" if self.csv_text is not None else f"CSV locations ({self.csv_path.name})"
