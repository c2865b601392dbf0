"""Autocomplete, ranked search and prefix suggestions over the name index."""
from typing import Callable, List, Optional, Set, Tuple, Union
from sl_locations.core.cache import LRUCache
from sl_locations.core.config import (
    AUTOCOMPLETE_RATE_LIMIT,
    SEARCH_RATE_LIMIT,
    RATE_LIMIT_WINDOW_MS,
    MIN_SCORE,
    DEFAULT_AUTOCOMPLETE_LIMIT,
    DEFAULT_SUGGESTION_LIMIT,
    VALIDATION_SUGGESTION_LIMIT,
)
from sl_locations.core.exceptions import ValidationError
from sl_locations.core.fuzzy import similarity, fuzzy_match
from sl_locations.core.models import LocationType, SearchIndexEntry, SearchOptions, SearchResult
from sl_locations.core.normalization import normalize_text, phonetic_key, generate_code
from sl_locations.core.rate_limit import RateLimiter
from sl_locations.core.search_index import SearchIndex
from sl_locations.core.security import sanitize_search_query

MIN_QUERY_LENGTH = 2
MIN_WORD_LENGTH = 3
FUZZY_PENALTY = 0.8
DEFAULT_CLIENT_ID = "anonymous"

_MISSING = object()

# Fields making up the display path of an entry, per level
_PATH_FIELDS = {
    LocationType.REGION: ("region",),
    LocationType.DISTRICT: ("region", "district"),
    LocationType.COUNCIL: ("region", "district", "council"),
    LocationType.CHIEFDOM: ("region", "district", "chiefdom"),
    LocationType.SECTION: ("region", "district", "chiefdom", "section"),
    LocationType.TOWN: ("region", "district", "chiefdom", "town"),
}


def build_full_path(entry: SearchIndexEntry) -> str:
    """
    Display path of an entry such as ``NORTHERN > TONKOLILI > KHOLIFA ROWALLA``.

    Levels come from the entry's source record down to the entry's own level;
    empty levels and a level repeating its parent's name are skipped.
    """
    parts: List[str] = []
    for field_name in _PATH_FIELDS[entry.type]:
        value = getattr(entry.record, field_name)
        if value and (not parts or parts[-1] != value):
            parts.append(value)
    if not parts or parts[-1] != entry.name:
        parts.append(entry.name)
    return " > ".join(parts)


class SearchEngine:
    """Query engine answering autocomplete, search and suggestion requests."""

    def __init__(
        self,
        index: SearchIndex,
        cache: Optional[LRUCache] = None,
        autocomplete_limiter: Optional[RateLimiter] = None,
        search_limiter: Optional[RateLimiter] = None,
        sanitizer: Callable[[str], str] = sanitize_search_query
    ):
        """
        Initialize search engine.

        Args:
            index: Fully built name index
            cache: Result cache; a private one is created if omitted
            autocomplete_limiter: Limiter guarding autocomplete
            search_limiter: Limiter guarding full search
            sanitizer: Callable validating and cleaning raw query text
        """
        self.index = index
        self.cache = cache if cache is not None else LRUCache()
        self.autocomplete_limiter = autocomplete_limiter or RateLimiter(
            AUTOCOMPLETE_RATE_LIMIT, RATE_LIMIT_WINDOW_MS, name="autocomplete"
        )
        self.search_limiter = search_limiter or RateLimiter(
            SEARCH_RATE_LIMIT, RATE_LIMIT_WINDOW_MS, name="search"
        )
        self.sanitizer = sanitizer

    def autocomplete(
        self,
        query: str,
        client_id: str = DEFAULT_CLIENT_ID,
        limit: int = DEFAULT_AUTOCOMPLETE_LIMIT
    ) -> List[str]:
        """
        Complete a partial location name.

        Every index key containing the query, or contained in it, contributes its
        entries. Names are deduplicated, scored against the query and kept above
        the minimum score.

        Args:
            query: Partial name typed by the user
            client_id: Caller identity for rate limiting
            limit: Maximum number of names

        Returns:
            Names ordered by descending score

        Raises:
            RateLimitError: If the client exceeded the autocomplete budget
            ValidationError: If the query is shorter than two characters or rejected
        """
        self.autocomplete_limiter.check(client_id)

        normalized = normalize_text(self.sanitizer(query))
        if len(normalized) < MIN_QUERY_LENGTH:
            raise ValidationError(
                f"Search query must be at least {MIN_QUERY_LENGTH} characters long"
            )

        cache_key = ("autocomplete", normalized, limit)
        cached = self.cache.get(cache_key, _MISSING)
        if cached is not _MISSING:
            return list(cached)

        scored: List[Tuple[str, float]] = []
        seen: Set[str] = set()
        for key, entries in self.index.items():
            if normalized not in key and key not in normalized:
                continue
            for entry in entries:
                if entry.name in seen:
                    continue
                score = similarity(normalized, entry.normalized)
                if score > MIN_SCORE:
                    scored.append((entry.name, score))
                    seen.add(entry.name)

        scored.sort(key=lambda item: item[1], reverse=True)
        names = [name for name, _ in scored[:max(limit, 0)]]

        self.cache.set(cache_key, tuple(names))
        return names

    def search(
        self,
        query: str,
        options: Optional[SearchOptions] = None,
        client_id: str = DEFAULT_CLIENT_ID
    ) -> List[SearchResult]:
        """
        Ranked full search.

        Args:
            query: Free-text query
            options: Limit, minimum score, type filter and fuzzy switch
            client_id: Caller identity for rate limiting

        Returns:
            Results by descending score; empty for a blank query

        Raises:
            RateLimitError: If the client exceeded the search budget
            ValidationError: If the query is rejected by the sanitizer
        """
        self.search_limiter.check(client_id)

        options = options or SearchOptions()
        if not query or (isinstance(query, str) and not query.strip()):
            return []

        normalized = normalize_text(self.sanitizer(query))
        if not normalized:
            return []

        cache_key = (
            "search",
            normalized,
            options.limit,
            options.min_score,
            options.types,
            options.fuzzy,
        )
        cached = self.cache.get(cache_key, _MISSING)
        if cached is not _MISSING:
            return list(cached)

        results = self.rank(normalized, options)
        self.cache.set(cache_key, tuple(results))
        return results

    def rank(self, query: str, options: Optional[SearchOptions] = None) -> List[SearchResult]:
        """
        Three-tier ranking behind :meth:`search`, without rate limiting or caching.

        1. Entries under the exact normalized key score 1.0.
        2. Entries under each query word of three or more characters are scored
           against the whole query and kept at or above the minimum score.
        3. If fuzzy matching is on and fewer than half the limit has been found,
           entries under the query's phonetic key are scored, scaled by 0.8 and
           kept at or above the minimum score.

        A (name, type) pair is collected once, by the first tier that reaches it.
        """
        options = options or SearchOptions()
        normalized = normalize_text(query)
        if not normalized or options.limit == 0:
            return []

        allowed_types = set(options.types)
        results: List[SearchResult] = []
        seen: Set[Tuple[str, LocationType]] = set()

        def collect(entries: List[SearchIndexEntry], scorer: Callable[[SearchIndexEntry], float], floor: float):
            for entry in entries:
                pair = (entry.name, entry.type)
                if entry.type not in allowed_types or pair in seen:
                    continue
                score = scorer(entry)
                if score >= floor:
                    results.append(self._to_result(entry, score))
                    seen.add(pair)

        collect(self.index.get(normalized), lambda entry: 1.0, 0.0)

        if len(results) < options.limit:
            for word in normalized.split(" "):
                if len(word) >= MIN_WORD_LENGTH:
                    collect(
                        self.index.get(word),
                        lambda entry: similarity(normalized, entry.normalized),
                        options.min_score,
                    )

        if options.fuzzy and len(results) < options.limit / 2:
            collect(
                self.index.get(phonetic_key(normalized)),
                lambda entry: similarity(normalized, entry.normalized) * FUZZY_PENALTY,
                options.min_score,
            )

        results.sort(key=lambda result: result.score, reverse=True)
        return results[:options.limit]

    def get_suggestions(
        self,
        partial: str,
        location_type: Optional[Union[LocationType, str]] = None,
        limit: int = DEFAULT_SUGGESTION_LIMIT
    ) -> List[str]:
        """
        Names whose index keys start with the partial input.

        Args:
            partial: Beginning of a name
            location_type: Restrict to one level
            limit: Maximum number of names

        Returns:
            Distinct names in alphabetical order; empty when the input
            normalizes to fewer than two characters

        Raises:
            ValidationError: If the input is rejected by the sanitizer
        """
        if not partial or (isinstance(partial, str) and len(partial.strip()) < MIN_QUERY_LENGTH):
            return []

        normalized = normalize_text(self.sanitizer(partial))
        if len(normalized) < MIN_QUERY_LENGTH:
            return []

        wanted = LocationType.parse(location_type) if location_type else None
        cache_key = ("suggestions", normalized, wanted, limit)
        cached = self.cache.get(cache_key, _MISSING)
        if cached is not _MISSING:
            return list(cached)

        suggestions = self.prefix_names(normalized, wanted, limit)
        self.cache.set(cache_key, tuple(suggestions))
        return suggestions

    def prefix_names(
        self,
        normalized: str,
        location_type: Optional[LocationType] = None,
        limit: int = DEFAULT_SUGGESTION_LIMIT
    ) -> List[str]:
        """
        Prefix lookup behind :meth:`get_suggestions` for already normalized text.

        Neither sanitized nor cached; empty for input shorter than two characters.
        """
        if len(normalized) < MIN_QUERY_LENGTH:
            return []

        names: Set[str] = set()
        for key, entries in self.index.items():
            if not key.startswith(normalized):
                continue
            names.update(
                entry.name for entry in entries
                if location_type is None or entry.type == location_type
            )

        return sorted(names)[:max(limit, 0)]

    def closest_names(
        self,
        name: str,
        location_type: Union[LocationType, str],
        limit: int = VALIDATION_SUGGESTION_LIMIT
    ) -> List[str]:
        """
        Names of one level most similar to the given name.

        Scores every distinct name of the level; not rate limited.
        """
        normalized = normalize_text(name)
        if not normalized:
            return []

        wanted = LocationType.parse(location_type)
        names: List[str] = []
        normalized_names: List[str] = []
        seen: Set[str] = set()
        for entry in self.index.entries():
            if entry.type != wanted or entry.name in seen:
                continue
            seen.add(entry.name)
            names.append(entry.name)
            normalized_names.append(entry.normalized)

        matches = fuzzy_match(normalized, normalized_names, threshold=MIN_SCORE, limit=limit)
        return [names[idx] for _, _, idx in matches]

    def clear_rate_limits(self):
        """Reset both rate limiters."""
        self.autocomplete_limiter.reset()
        self.search_limiter.reset()

    @staticmethod
    def _to_result(entry: SearchIndexEntry, score: float) -> SearchResult:
        return SearchResult(
            name=entry.name,
            type=entry.type,
            full_path=build_full_path(entry),
            code=generate_code(entry.type.value.upper(), entry.name),
            score=score,
        )
