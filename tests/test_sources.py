"""Tests for record providers."""
import pytest
from sl_locations.core.exceptions import FormatError
from sl_locations.core.models import FlatRecord
from sl_locations.sources import CSVRecordSource, InMemoryRecordSource


def test_csv_from_text(sample_csv):
    """Test loading records from CSV text."""
    records = CSVRecordSource(csv_text=sample_csv).load_records()

    assert len(records) == 6
    assert records[0] == FlatRecord(
        "NORTHERN", "TONKOLILI", "", "KHOLIFA MAMUNTHA/MAYOSSO", "MAMUNTHA",
        "MAGBASS (KHOLIFA MAMUNTHA/MAYOSSO)",
    )
    assert records[-1].town == "BO"


def test_csv_from_file(sample_csv_path):
    source = CSVRecordSource(sample_csv_path)

    assert len(source.load_records()) == 6
    assert source.get_name() == "CSV locations (locations.csv)"


def test_csv_cleans_and_filters_rows():
    """Fields are cleaned; rows without region or town are dropped."""
    text = (
        "IDREGION,iddistrict,idcouncil,idchiefdom,idsection,idtown\n"
        "NORTHERN, BOMBALI ,,<b>BOMBALI SEBORA</b>,MAKENI,MAKENI\n"
        ",BO,,KAKUA,NJAI,BO\n"
        "SOUTHERN,BO,,KAKUA,NJAI,\n"
    )
    records = CSVRecordSource(csv_text=text).load_records()

    assert len(records) == 1
    assert records[0].district == "BOMBALI"
    assert records[0].chiefdom == "bBOMBALI SEBORA/b"


def test_csv_keeps_na_like_names():
    """Values such as NA are names, not missing data."""
    text = (
        "idregion,iddistrict,idcouncil,idchiefdom,idsection,idtown\n"
        "SOUTHERN,BO,NA,KAKUA,NULL,BO\n"
    )
    record = CSVRecordSource(csv_text=text).load_records()[0]

    assert record.council == "NA"
    assert record.section == "NULL"


def test_csv_missing_headers():
    text = "idregion,iddistrict,idtown\nNORTHERN,BOMBALI,MAKENI\n"

    with pytest.raises(FormatError) as exc_info:
        CSVRecordSource(csv_text=text).load_records()
    assert "idcouncil" in str(exc_info.value)


def test_csv_empty_input(tmp_path):
    """Test FormatError for empty or missing data."""
    with pytest.raises(FormatError):
        CSVRecordSource(csv_text="").load_records()

    empty = tmp_path / "empty.csv"
    empty.write_text("", encoding="utf-8")
    with pytest.raises(FormatError):
        CSVRecordSource(empty).load_records()

    with pytest.raises(FormatError):
        CSVRecordSource(tmp_path / "missing.csv").load_records()


def test_csv_no_usable_rows():
    text = "idregion,iddistrict,idcouncil,idchiefdom,idsection,idtown\n,BO,,KAKUA,NJAI,BO\n"

    with pytest.raises(FormatError):
        CSVRecordSource(csv_text=text).load_records()


def test_in_memory_row_shapes():
    """Tuples, dicts and FlatRecords are all accepted."""
    source = InMemoryRecordSource([
        ("NORTHERN", "BOMBALI", "", "BOMBALI SEBORA", "MAKENI", "MAKENI"),
        {"idregion": "SOUTHERN", "iddistrict": "BO", "idtown": "BO"},
        FlatRecord("SOUTHERN", "MOYAMBA", town=" MOYAMBA "),
        ("NORTHERN", "TONKOLILI"),
    ])
    records = source.load_records()

    assert len(records) == 3
    assert records[1] == FlatRecord("SOUTHERN", "BO", town="BO")
    assert records[2].town == "MOYAMBA"


def test_in_memory_rejects_unknown_rows():
    with pytest.raises(FormatError):
        InMemoryRecordSource([42]).load_records()
    with pytest.raises(FormatError):
        InMemoryRecordSource([]).load_records()
