"""Data models for location records, hierarchy nodes and query results."""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple
from sl_locations.core.exceptions import ValidationError


class LocationType(str, Enum):
    """Administrative level of a named location."""
    REGION = "region"
    DISTRICT = "district"
    COUNCIL = "council"
    CHIEFDOM = "chiefdom"
    SECTION = "section"
    TOWN = "town"

    @classmethod
    def parse(cls, value: Any) -> "LocationType":
        """
        Resolve a location type from an enum member or a type name.

        "province" is accepted for REGION and "village" for TOWN.

        Raises:
            ValueError: If the name is not a known location type
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        name = _TYPE_ALIASES.get(name, name)
        return cls(name)


_TYPE_ALIASES = {
    "province": "region",
    "village": "town",
}

ALL_LOCATION_TYPES: Tuple[LocationType, ...] = tuple(LocationType)


@dataclass(frozen=True)
class FlatRecord:
    """One row of the source table: a town and its ancestors."""
    region: str
    district: str = ""
    council: str = ""
    chiefdom: str = ""
    section: str = ""
    town: str = ""

    def value_for(self, location_type: LocationType) -> str:
        """Get the name this record holds at the given level."""
        return getattr(self, LocationType.parse(location_type).value)

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary keyed by the source column names."""
        return {
            "idregion": self.region,
            "iddistrict": self.district,
            "idcouncil": self.council,
            "idchiefdom": self.chiefdom,
            "idsection": self.section,
            "idtown": self.town,
        }


@dataclass
class Town:
    """Leaf of the hierarchy."""
    name: str
    code: str
    chiefdom: str
    chiefdom_code: str
    district: str
    district_code: str
    province: str
    province_code: str
    section: Optional[str] = None
    council: Optional[str] = None
    population: Optional[int] = None
    type: LocationType = LocationType.TOWN

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


@dataclass
class Chiefdom:
    """Chiefdom node owning its towns."""
    name: str
    code: str
    district: str
    district_code: str
    province: str
    province_code: str
    towns: List[Town] = field(default_factory=list)
    type: LocationType = LocationType.CHIEFDOM

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "code": self.code,
            "district": self.district,
            "district_code": self.district_code,
            "province": self.province,
            "province_code": self.province_code,
            "towns": [town.to_dict() for town in self.towns],
        }


@dataclass
class District:
    """District node owning its chiefdoms."""
    name: str
    code: str
    province: str
    province_code: str
    chiefdoms: List[Chiefdom] = field(default_factory=list)
    type: LocationType = LocationType.DISTRICT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "code": self.code,
            "province": self.province,
            "province_code": self.province_code,
            "chiefdoms": [chiefdom.to_dict() for chiefdom in self.chiefdoms],
        }


@dataclass
class Province:
    """Top-level region node owning its districts."""
    name: str
    code: str
    districts: List[District] = field(default_factory=list)
    type: LocationType = LocationType.REGION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "code": self.code,
            "districts": [district.to_dict() for district in self.districts],
        }


@dataclass(frozen=True)
class SearchIndexEntry:
    """Entry in the inverted index pointing back at its source record."""
    name: str
    type: LocationType
    normalized: str
    record: FlatRecord = field(compare=False, repr=False)
    partial_match: bool = False

    @property
    def identity(self) -> Tuple[str, LocationType, str]:
        return (self.name, self.type, self.normalized)


@dataclass(frozen=True)
class SearchResult:
    """Ranked search hit."""
    name: str
    type: LocationType
    full_path: str
    code: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "full_path": self.full_path,
            "code": self.code,
            "score": self.score,
        }


@dataclass
class SearchOptions:
    """Options for full search."""
    limit: int = 20
    min_score: float = 0.3
    types: Tuple[LocationType, ...] = ALL_LOCATION_TYPES
    fuzzy: bool = True

    def __post_init__(self):
        try:
            self.types = tuple(LocationType.parse(t) for t in self.types)
        except ValueError as e:
            raise ValidationError(f"Unknown location type in search options: {e}") from e
        self.limit = max(int(self.limit), 0)


@dataclass
class PlaceDetails:
    """Details of a single place found by name."""
    name: str
    type: LocationType
    code: str
    province: Optional[str] = None
    district: Optional[str] = None
    chiefdom: Optional[str] = None
    population: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


@dataclass
class ValidationResult:
    """Outcome of a membership check."""
    is_valid: bool
    message: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LocationHierarchy:
    """Candidate names for each level, any of which may be omitted."""
    region: Optional[str] = None
    district: Optional[str] = None
    council: Optional[str] = None
    chiefdom: Optional[str] = None
    section: Optional[str] = None
    town: Optional[str] = None


@dataclass(frozen=True)
class LocationQuery:
    """Filter over flat records by ancestor names."""
    province: Optional[str] = None
    district: Optional[str] = None
    chiefdom: Optional[str] = None


@dataclass
class LocationStatistics:
    """Counts describing the loaded dataset."""
    total_records: int
    regions: int
    districts: int
    councils: int
    chiefdoms: int
    sections: int
    towns: int
    cache_size: int
    index_size: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
