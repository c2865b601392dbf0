"""Providers of flat location records."""
from sl_locations.sources.base import RecordSource
from sl_locations.sources.csv_provider import CSVRecordSource
from sl_locations.sources.memory_provider import InMemoryRecordSource

__all__ = ["RecordSource", "CSVRecordSource", "InMemoryRecordSource"]
