"""Hierarchy browsing over the loaded location records."""
from typing import Callable, Hashable, Iterable, List, Optional, Sequence
from sl_locations.core.cache import LRUCache
from sl_locations.core.models import (
    FlatRecord,
    LocationQuery,
    LocationStatistics,
    LocationType,
    PlaceDetails,
    SearchOptions,
)
from sl_locations.core.normalization import normalize_text, generate_code
from sl_locations.core.search_engine import SearchEngine

_MISSING = object()

# Levels checked by find_place for an exact name, most specific first
_PLACE_LOOKUP_ORDER = (
    (LocationType.TOWN, "TOWN"),
    (LocationType.CHIEFDOM, "CHIEFDOM"),
    (LocationType.DISTRICT, "DISTRICT"),
    (LocationType.REGION, "PROVINCE"),
)


def _distinct_sorted(values: Iterable[str]) -> List[str]:
    return sorted({value for value in values if value and value.strip()})


class LocationDirectory:
    """
    Lists of names within an ancestor scope, looked up from the flat records.

    Scope names are matched by normalized comparison. Results are cached in the
    shared result cache under tuple keys.
    """

    def __init__(self, records: Sequence[FlatRecord], engine: SearchEngine, cache: LRUCache):
        self.records = list(records)
        self.engine = engine
        self.cache = cache

    def _cached(self, key: Hashable, compute: Callable[[], object]):
        value = self.cache.get(key, _MISSING)
        if value is _MISSING:
            value = compute()
            self.cache.set(key, value)
        return value

    def _filter(self, **scope: Optional[str]) -> List[FlatRecord]:
        """Records whose named fields normalize equal to the given names; None skips a field."""
        records = self.records
        for field_name, name in scope.items():
            if name is not None:
                wanted = normalize_text(name)
                records = [r for r in records if normalize_text(getattr(r, field_name)) == wanted]
        return records

    def get_provinces(self) -> List[str]:
        """All region names."""
        return list(self._cached(
            ("provinces",),
            lambda: tuple(_distinct_sorted(r.region for r in self.records)),
        ))

    def get_districts(self, province: Optional[str] = None) -> List[str]:
        """Districts, optionally limited to one region."""
        return list(self._cached(
            ("districts", normalize_text(province)),
            lambda: tuple(_distinct_sorted(r.district for r in self._filter(region=province or None))),
        ))

    def get_councils(self, district: str) -> List[str]:
        """Councils within a district."""
        return list(self._cached(
            ("councils", normalize_text(district)),
            lambda: tuple(_distinct_sorted(
                r.council for r in self._filter(district=district)
            )),
        ))

    def get_chiefdoms(self, district: str) -> List[str]:
        """Chiefdoms within a district."""
        return list(self._cached(
            ("chiefdoms", normalize_text(district)),
            lambda: tuple(_distinct_sorted(
                r.chiefdom for r in self._filter(district=district)
            )),
        ))

    def get_sections(self, chiefdom: str) -> List[str]:
        """Sections within a chiefdom."""
        return list(self._cached(
            ("sections", normalize_text(chiefdom)),
            lambda: tuple(_distinct_sorted(
                r.section for r in self._filter(chiefdom=chiefdom)
            )),
        ))

    def get_towns(self, chiefdom: Optional[str] = None, section: Optional[str] = None) -> List[str]:
        """
        Towns, optionally limited to a chiefdom and, within it, a section.

        A section is only applied together with a chiefdom.
        """
        if not chiefdom:
            section = None
        return list(self._cached(
            ("towns", normalize_text(chiefdom), normalize_text(section)),
            lambda: tuple(_distinct_sorted(
                r.town for r in self._filter(chiefdom=chiefdom or None, section=section or None)
            )),
        ))

    def get_locations_by_query(self, query: Optional[LocationQuery] = None) -> List[FlatRecord]:
        """Records matching every given ancestor name."""
        query = query or LocationQuery()
        key = (
            "query",
            normalize_text(query.province),
            normalize_text(query.district),
            normalize_text(query.chiefdom),
        )
        return list(self._cached(
            key,
            lambda: tuple(self._filter(
                region=query.province or None,
                district=query.district or None,
                chiefdom=query.chiefdom or None,
            )),
        ))

    def get_location_hierarchy(self, town: str) -> Optional[FlatRecord]:
        """The first record for a town, or None."""
        wanted = normalize_text(town)
        if not wanted:
            return None
        return self._cached(
            ("hierarchy", wanted),
            lambda: next((r for r in self.records if normalize_text(r.town) == wanted), None),
        )

    def find_place(self, name: str) -> Optional[PlaceDetails]:
        """
        Look up a place by name.

        An exact normalized match is tried at town, chiefdom, district and
        region level in that order; otherwise the best ranked search result is
        returned.
        """
        wanted = normalize_text(name)
        if not wanted:
            return None
        return self._cached(("place", wanted), lambda: self._find_place(wanted))

    def _find_place(self, wanted: str) -> Optional[PlaceDetails]:
        for location_type, code_label in _PLACE_LOOKUP_ORDER:
            for record in self.records:
                value = record.value_for(location_type)
                if normalize_text(value) == wanted:
                    return self._place_from_record(record, location_type, code_label)

        results = self.engine.rank(wanted, SearchOptions(limit=1))
        if not results:
            return None
        best = results[0]
        record = next(
            (r for r in self.records if r.value_for(best.type) == best.name),
            None,
        )
        return PlaceDetails(
            name=best.name,
            type=best.type,
            code=best.code,
            province=record.region if record else None,
            district=record.district if record else None,
            chiefdom=record.chiefdom if record else None,
        )

    @staticmethod
    def _place_from_record(record: FlatRecord, location_type: LocationType, code_label: str) -> PlaceDetails:
        name = record.value_for(location_type)
        place = PlaceDetails(name=name, type=location_type, code=generate_code(code_label, name))
        if location_type != LocationType.REGION:
            place.province = record.region
        if location_type in (LocationType.CHIEFDOM, LocationType.TOWN):
            place.district = record.district
        if location_type == LocationType.TOWN:
            place.chiefdom = record.chiefdom
        return place

    def get_statistics(self, index_size: int = 0) -> LocationStatistics:
        """Counts of records and distinct names per level."""
        def distinct(field_name: str) -> int:
            return len(_distinct_sorted(getattr(r, field_name) for r in self.records))

        return LocationStatistics(
            total_records=len(self.records),
            regions=distinct("region"),
            districts=distinct("district"),
            councils=distinct("council"),
            chiefdoms=distinct("chiefdom"),
            sections=distinct("section"),
            towns=distinct("town"),
            cache_size=len(self.cache),
            index_size=index_size,
        )

    def clear_cache(self):
        self.cache.clear()
