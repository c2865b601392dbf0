"""Pytest configuration and fixtures."""
import pytest
from sl_locations.core.models import FlatRecord
from sl_locations.core.service import LocationService


SAMPLE_ROWS = [
    ("NORTHERN", "TONKOLILI", "", "KHOLIFA MAMUNTHA/MAYOSSO", "MAMUNTHA", "MAGBASS (KHOLIFA MAMUNTHA/MAYOSSO)"),
    ("NORTHERN", "TONKOLILI", "TONKOLILI DISTRICT COUNCIL", "KHOLIFA ROWALLA", "MAGBURAKA", "MAGBURAKA"),
    ("NORTHERN", "TONKOLILI", "TONKOLILI DISTRICT COUNCIL", "KHOLIFA ROWALLA", "MAGBURAKA", "MASANGA"),
    ("NORTHERN", "BOMBALI", "MAKENI CITY COUNCIL", "BOMBALI SEBORA", "MAKENI", "MAKENI"),
    ("SOUTHERN", "MOYAMBA", "MOYAMBA DISTRICT COUNCIL", "KAIYAMBA", "MOYAMBA JUNCTION", "MOYAMBA"),
    ("SOUTHERN", "BO", "BO CITY COUNCIL", "KAKUA", "NJAI", "BO"),
]

SAMPLE_CSV = """idregion,iddistrict,idcouncil,idchiefdom,idsection,idtown
NORTHERN,TONKOLILI,,KHOLIFA MAMUNTHA/MAYOSSO,MAMUNTHA,MAGBASS (KHOLIFA MAMUNTHA/MAYOSSO)
NORTHERN,TONKOLILI,TONKOLILI DISTRICT COUNCIL,KHOLIFA ROWALLA,MAGBURAKA,MAGBURAKA
NORTHERN,TONKOLILI,TONKOLILI DISTRICT COUNCIL,KHOLIFA ROWALLA,MAGBURAKA,MASANGA
NORTHERN,BOMBALI,MAKENI CITY COUNCIL,BOMBALI SEBORA,MAKENI,MAKENI
SOUTHERN,MOYAMBA,MOYAMBA DISTRICT COUNCIL,KAIYAMBA,MOYAMBA JUNCTION,MOYAMBA
SOUTHERN,BO,BO CITY COUNCIL,KAKUA,NJAI,BO
"""


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def sample_records():
    """Sample flat records covering two regions and four districts."""
    return [FlatRecord(*row) for row in SAMPLE_ROWS]


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def sample_csv_path(tmp_path, sample_csv):
    """Write the sample table to a temporary CSV file."""
    path = tmp_path / "locations.csv"
    path.write_text(sample_csv, encoding="utf-8")
    return path


@pytest.fixture
def service(sample_records, fake_clock):
    """Initialized service over the sample records."""
    return LocationService.from_records(sample_records, clock=fake_clock)


@pytest.fixture
def magbass_service(fake_clock):
    """Service holding the single Magbass record."""
    return LocationService.from_records([SAMPLE_ROWS[0]], clock=fake_clock)


@pytest.fixture
def engine(service):
    return service.engine


@pytest.fixture
def directory(service):
    return service.directory


@pytest.fixture
def validator(service):
    return service.validator


@pytest.fixture
def sample_rows():
    """Sample table rows as plain tuples."""
    return list(SAMPLE_ROWS)
