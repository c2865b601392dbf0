"""Tests for timing utilities."""
import json
import logging
import pytest
from sl_locations.utils.logging import LOGGER_NAME
from sl_locations.utils.timing import Timer, time_function


def logged_entries(caplog):
    return [json.loads(record.getMessage()) for record in caplog.records if record.name == LOGGER_NAME]


def test_timer_logs_fields(caplog):
    """Constructor fields and fields added in the block are logged together."""
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)

    with Timer("build_search_index", records=6) as timer:
        timer.add(index_keys=40)

    entry = logged_entries(caplog)[-1]
    assert entry["operation"] == "build_search_index"
    assert entry["records"] == 6
    assert entry["index_keys"] == 40
    assert entry["succeeded"] is True
    assert entry["elapsed_seconds"] >= 0
    assert timer.elapsed is not None


def test_timer_logs_failure(caplog):
    """A failing block is logged as a warning and the error propagates."""
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)

    with pytest.raises(ValueError):
        with Timer("load_csv_records", source="CSV locations"):
            raise ValueError("bad")

    entry = logged_entries(caplog)[-1]
    assert entry["level"] == "WARNING"
    assert entry["succeeded"] is False
    assert entry["source"] == "CSV locations"


def test_service_logs_index_build(caplog, sample_records):
    """Initializing a service logs record and key counts for the index build."""
    from sl_locations.core.service import LocationService

    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    service = LocationService.from_records(sample_records)

    entry = next(e for e in logged_entries(caplog) if e.get("operation") == "build_search_index")
    assert entry["records"] == 6
    assert entry["index_keys"] == len(service.index)


def test_csv_load_logs_counts(caplog, sample_csv):
    """Loading a CSV logs row and record counts."""
    from sl_locations.sources import CSVRecordSource

    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    CSVRecordSource(csv_text=sample_csv).load_records()

    entry = next(e for e in logged_entries(caplog) if e.get("operation") == "load_csv_records")
    assert entry["rows"] == 6
    assert entry["records"] == 6
    assert entry["source"] == "CSV locations"


def test_time_function(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)

    @time_function
    def double(value):
        return value * 2

    assert double(4) == 8
    entry = logged_entries(caplog)[-1]
    assert entry["function"] == "double"
    assert entry["module"] == __name__
