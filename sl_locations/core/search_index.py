"""Inverted name index over location records."""
from typing import Dict, Iterable, Iterator, List, Set, Tuple
from sl_locations.core.admin_hierarchy import iter_tree_records
from sl_locations.core.models import (
    ALL_LOCATION_TYPES,
    FlatRecord,
    LocationType,
    Province,
    SearchIndexEntry,
    Town,
)
from sl_locations.core.normalization import normalize_text, significant_words, phonetic_key


class SearchIndex:
    """
    Mapping from normalized keys to index entries.

    A name is reachable under its full normalized form, under each significant
    word of a multi-word name, and under its phonetic key. Entries under a key
    keep insertion order, and an entry with the same (name, type, normalized)
    identity is stored at most once per key.
    """

    def __init__(self):
        self._entries: Dict[str, List[SearchIndexEntry]] = {}
        self._identities: Dict[str, Set[Tuple[str, LocationType, str]]] = {}

    def add(self, name: str, location_type: LocationType, record: FlatRecord):
        """
        Index one named location.

        Blank names are ignored.
        """
        if not name or not name.strip():
            return

        normalized = normalize_text(name)
        entry = SearchIndexEntry(
            name=name.strip(),
            type=LocationType.parse(location_type),
            normalized=normalized,
            record=record,
        )
        self._add_to_key(normalized, entry)

        words = significant_words(normalized)
        if words:
            partial = SearchIndexEntry(
                name=entry.name,
                type=entry.type,
                normalized=normalized,
                record=record,
                partial_match=True,
            )
            for word in words:
                self._add_to_key(word, partial)

        phonetic = phonetic_key(normalized)
        if phonetic != normalized:
            self._add_to_key(phonetic, SearchIndexEntry(
                name=entry.name,
                type=entry.type,
                normalized=normalized,
                record=record,
                partial_match=True,
            ))

    def _add_to_key(self, key: str, entry: SearchIndexEntry):
        identities = self._identities.setdefault(key, set())
        if entry.identity in identities:
            return
        identities.add(entry.identity)
        self._entries.setdefault(key, []).append(entry)

    def get(self, key: str) -> List[SearchIndexEntry]:
        """Entries stored under an exact key (empty list if absent)."""
        return list(self._entries.get(key, ()))

    def items(self) -> Iterator[Tuple[str, List[SearchIndexEntry]]]:
        """Iterate (key, entries) pairs in key insertion order."""
        return iter(self._entries.items())

    def keys(self) -> Iterator[str]:
        return iter(self._entries.keys())

    def entries(self) -> Iterator[SearchIndexEntry]:
        """Every stored entry, including partial ones, key by key."""
        for entries in self._entries.values():
            yield from entries

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def build_search_index(records: Iterable[FlatRecord]) -> SearchIndex:
    """
    Build an index over every named level of every record.

    All six fields (region, district, council, chiefdom, section, town) of each
    record are indexed with the record as the entry's origin.

    Args:
        records: Flat records

    Returns:
        Fully built index
    """
    index = SearchIndex()
    for record in records:
        for location_type in ALL_LOCATION_TYPES:
            index.add(record.value_for(location_type), location_type, record)
    return index


def index_hierarchy(provinces: Iterable[Province]) -> SearchIndex:
    """
    Build an index from a hierarchy tree.

    Provinces, districts, chiefdoms and towns are indexed at their own level;
    each town's council and section are indexed as well.
    """
    index = SearchIndex()
    for node, record in iter_tree_records(provinces):
        index.add(node.name, node.type, record)
        if isinstance(node, Town):
            index.add(record.council, LocationType.COUNCIL, record)
            index.add(record.section, LocationType.SECTION, record)
    return index
