"""Location service owning the dataset, index, cache and rate limiters."""
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
from sl_locations.core.admin_hierarchy import build_hierarchy
from sl_locations.core.cache import LRUCache
from sl_locations.core.config import (
    CACHE_MAX_SIZE,
    AUTOCOMPLETE_RATE_LIMIT,
    SEARCH_RATE_LIMIT,
    RATE_LIMIT_WINDOW_MS,
    DEFAULT_AUTOCOMPLETE_LIMIT,
    DEFAULT_SUGGESTION_LIMIT,
)
from sl_locations.core.directory import LocationDirectory
from sl_locations.core.exceptions import NotInitializedError
from sl_locations.core.models import (
    FlatRecord,
    LocationHierarchy,
    LocationQuery,
    LocationStatistics,
    LocationType,
    PlaceDetails,
    Province,
    SearchOptions,
    SearchResult,
    ValidationResult,
)
from sl_locations.core.rate_limit import RateLimiter
from sl_locations.core.search_engine import DEFAULT_CLIENT_ID, SearchEngine
from sl_locations.core.search_index import SearchIndex, build_search_index
from sl_locations.core.validator import HierarchyValidator
from sl_locations.sources.base import RecordSource
from sl_locations.sources.csv_provider import CSVRecordSource
from sl_locations.sources.memory_provider import InMemoryRecordSource
from sl_locations.utils.logging import log_structured
from sl_locations.utils.timing import Timer


class LocationService:
    """
    Entry point for lookup, search and validation.

    The service is constructed empty and becomes usable after
    :meth:`initialize`. Every query before that raises NotInitializedError.
    """

    def __init__(
        self,
        cache_max_size: int = CACHE_MAX_SIZE,
        autocomplete_limit: int = AUTOCOMPLETE_RATE_LIMIT,
        search_limit: int = SEARCH_RATE_LIMIT,
        window_ms: int = RATE_LIMIT_WINDOW_MS,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize service.

        Args:
            cache_max_size: Maximum number of cached query results
            autocomplete_limit: Autocomplete requests per client per window
            search_limit: Search requests per client per window
            window_ms: Rate-limit window in milliseconds
            clock: Millisecond time source for the rate limiters
        """
        self.cache = LRUCache(cache_max_size)
        limiter_kwargs = {"clock": clock} if clock is not None else {}
        self.autocomplete_limiter = RateLimiter(
            autocomplete_limit, window_ms, name="autocomplete", **limiter_kwargs
        )
        self.search_limiter = RateLimiter(
            search_limit, window_ms, name="search", **limiter_kwargs
        )

        self.records: List[FlatRecord] = []
        self.provinces: List[Province] = []
        self.index: Optional[SearchIndex] = None
        self._engine: Optional[SearchEngine] = None
        self._directory: Optional[LocationDirectory] = None
        self._validator: Optional[HierarchyValidator] = None
        self._lock = threading.Lock()

    @classmethod
    def from_csv(cls, csv_path: Optional[Union[str, Path]] = None, **kwargs) -> "LocationService":
        """Create and initialize a service from a CSV file."""
        service = cls(**kwargs)
        service.initialize(CSVRecordSource(csv_path))
        return service

    @classmethod
    def from_records(cls, records: Iterable[Any], **kwargs) -> "LocationService":
        """Create and initialize a service from in-memory rows."""
        service = cls(**kwargs)
        service.initialize(records)
        return service

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def initialize(self, source: Union[RecordSource, Iterable[Any]]):
        """
        Load records, build the hierarchy tree and the search index.

        A second call on an initialized service does nothing. If loading or
        building fails the service stays uninitialized.

        Args:
            source: A RecordSource, or rows accepted by InMemoryRecordSource

        Raises:
            FormatError: If the source holds no usable records
        """
        with self._lock:
            if self.is_initialized:
                log_structured("info", "Location service already initialized")
                return

            if not isinstance(source, RecordSource):
                source = InMemoryRecordSource(source)

            records = source.load_records()
            provinces = build_hierarchy(records)
            with Timer("build_search_index", records=len(records)) as timer:
                index = build_search_index(records)
                timer.add(index_keys=len(index))

            engine = SearchEngine(
                index,
                cache=self.cache,
                autocomplete_limiter=self.autocomplete_limiter,
                search_limiter=self.search_limiter,
            )
            directory = LocationDirectory(records, engine, self.cache)

            self.records = records
            self.provinces = provinces
            self.index = index
            self._engine = engine
            self._directory = directory
            self._validator = HierarchyValidator(directory, engine)

        log_structured(
            "info",
            "Location service initialized",
            source=source.get_name(),
            records=len(records),
            provinces=len(provinces),
            index_keys=len(index),
        )

    def _require(self, component):
        if component is None:
            raise NotInitializedError("Location service has not been initialized")
        return component

    @property
    def engine(self) -> SearchEngine:
        return self._require(self._engine)

    @property
    def directory(self) -> LocationDirectory:
        return self._require(self._directory)

    @property
    def validator(self) -> HierarchyValidator:
        return self._require(self._validator)

    # Browsing

    def get_provinces(self) -> List[str]:
        return self.directory.get_provinces()

    def get_districts(self, province: Optional[str] = None) -> List[str]:
        return self.directory.get_districts(province)

    def get_councils(self, district: str) -> List[str]:
        return self.directory.get_councils(district)

    def get_chiefdoms(self, district: str) -> List[str]:
        return self.directory.get_chiefdoms(district)

    def get_sections(self, chiefdom: str) -> List[str]:
        return self.directory.get_sections(chiefdom)

    def get_towns(self, chiefdom: Optional[str] = None, section: Optional[str] = None) -> List[str]:
        return self.directory.get_towns(chiefdom, section)

    def get_locations_by_query(self, query: Optional[LocationQuery] = None) -> List[FlatRecord]:
        return self.directory.get_locations_by_query(query)

    def get_location_hierarchy(self, town: str) -> Optional[FlatRecord]:
        return self.directory.get_location_hierarchy(town)

    def find_place(self, name: str) -> Optional[PlaceDetails]:
        return self.directory.find_place(name)

    # Search

    def autocomplete(
        self,
        query: str,
        client_id: str = DEFAULT_CLIENT_ID,
        limit: int = DEFAULT_AUTOCOMPLETE_LIMIT
    ) -> List[str]:
        return self.engine.autocomplete(query, client_id, limit)

    def search(
        self,
        query: str,
        options: Optional[SearchOptions] = None,
        client_id: str = DEFAULT_CLIENT_ID
    ) -> List[SearchResult]:
        return self.engine.search(query, options, client_id)

    def get_suggestions(
        self,
        partial: str,
        location_type: Optional[Union[LocationType, str]] = None,
        limit: int = DEFAULT_SUGGESTION_LIMIT
    ) -> List[str]:
        return self.engine.get_suggestions(partial, location_type, limit)

    # Validation

    def is_valid_region(self, name: str) -> ValidationResult:
        return self.validator.is_valid_region(name)

    def is_valid_district(self, name: str, region: Optional[str] = None) -> ValidationResult:
        return self.validator.is_valid_district(name, region)

    def is_valid_council(self, name: str, district: Optional[str] = None) -> ValidationResult:
        return self.validator.is_valid_council(name, district)

    def is_valid_chiefdom(self, name: str, district: Optional[str] = None) -> ValidationResult:
        return self.validator.is_valid_chiefdom(name, district)

    def is_valid_section(self, name: str, chiefdom: Optional[str] = None) -> ValidationResult:
        return self.validator.is_valid_section(name, chiefdom)

    def is_valid_town(
        self,
        name: str,
        chiefdom: Optional[str] = None,
        section: Optional[str] = None
    ) -> ValidationResult:
        return self.validator.is_valid_town(name, chiefdom, section)

    def validate_hierarchy(
        self,
        location: Union[LocationHierarchy, Dict[str, Optional[str]]]
    ) -> ValidationResult:
        return self.validator.validate_hierarchy(location)

    def validate_batch(
        self,
        names: Iterable[str],
        location_type: Union[LocationType, str]
    ) -> List[ValidationResult]:
        return self.validator.validate_batch(names, location_type)

    # Maintenance

    def get_statistics(self) -> LocationStatistics:
        return self.directory.get_statistics(index_size=len(self.index))

    def clear_cache(self):
        self.cache.clear()

    def clear_rate_limits(self):
        self.autocomplete_limiter.reset()
        self.search_limiter.reset()
