"""Membership validation of location names within their administrative scope."""
from typing import Callable, Dict, Iterable, List, Optional, Union
from sl_locations.core.config import VALIDATION_SUGGESTION_LIMIT
from sl_locations.core.directory import LocationDirectory
from sl_locations.core.exceptions import ValidationError
from sl_locations.core.models import LocationHierarchy, LocationType, ValidationResult
from sl_locations.core.normalization import normalize_text
from sl_locations.core.search_engine import SearchEngine
from sl_locations.core.security import sanitize_search_query
from sl_locations.utils.logging import log_structured


class HierarchyValidator:
    """Checks that names exist, optionally within a given parent, and proposes corrections."""

    def __init__(
        self,
        directory: LocationDirectory,
        engine: SearchEngine,
        sanitizer: Callable[[str], str] = sanitize_search_query,
        suggestion_limit: int = VALIDATION_SUGGESTION_LIMIT
    ):
        self.directory = directory
        self.engine = engine
        self.sanitizer = sanitizer
        self.suggestion_limit = suggestion_limit

    def _validate(
        self,
        name: str,
        location_type: LocationType,
        canonical_names: Callable[[], List[str]],
        scope: Optional[str] = None
    ) -> ValidationResult:
        try:
            sanitized = self.sanitizer(name)
            if scope:
                self.sanitizer(scope)
        except ValidationError as e:
            log_structured(
                "info",
                "Validation input rejected",
                location_type=location_type.value,
                reason=e.message,
            )
            return ValidationResult(is_valid=False, message=e.message)

        normalized = normalize_text(sanitized)
        if normalized and any(normalize_text(c) == normalized for c in canonical_names()):
            return ValidationResult(is_valid=True)

        message = f"'{name}' is not a valid {location_type.value}"
        if scope:
            message += f" in {scope}"
        return ValidationResult(
            is_valid=False,
            message=message,
            suggestions=self.suggest(sanitized, location_type),
        )

    def suggest(self, name: str, location_type: LocationType) -> List[str]:
        """
        Up to ``suggestion_limit`` corrections for an already sanitized name.

        Names starting with the input come first, followed by the closest
        names by similarity.
        """
        normalized = normalize_text(name)
        if not normalized:
            return []
        suggestions = self.engine.prefix_names(normalized, location_type, self.suggestion_limit)
        if len(suggestions) < self.suggestion_limit:
            for candidate in self.engine.closest_names(normalized, location_type, self.suggestion_limit):
                if candidate not in suggestions:
                    suggestions.append(candidate)
                if len(suggestions) >= self.suggestion_limit:
                    break
        return suggestions[:self.suggestion_limit]

    def is_valid_region(self, name: str) -> ValidationResult:
        return self._validate(name, LocationType.REGION, self.directory.get_provinces)

    def is_valid_district(self, name: str, region: Optional[str] = None) -> ValidationResult:
        """Check a district, within a region when one is given."""
        return self._validate(
            name,
            LocationType.DISTRICT,
            lambda: self.directory.get_districts(region),
            scope=region,
        )

    def is_valid_council(self, name: str, district: Optional[str] = None) -> ValidationResult:
        return self._validate(
            name,
            LocationType.COUNCIL,
            lambda: self.directory.get_councils(district),
            scope=district,
        )

    def is_valid_chiefdom(self, name: str, district: Optional[str] = None) -> ValidationResult:
        return self._validate(
            name,
            LocationType.CHIEFDOM,
            lambda: self.directory.get_chiefdoms(district),
            scope=district,
        )

    def is_valid_section(self, name: str, chiefdom: Optional[str] = None) -> ValidationResult:
        return self._validate(
            name,
            LocationType.SECTION,
            lambda: self.directory.get_sections(chiefdom),
            scope=chiefdom,
        )

    def is_valid_town(
        self,
        name: str,
        chiefdom: Optional[str] = None,
        section: Optional[str] = None
    ) -> ValidationResult:
        """Check a town, within a chiefdom (and section) when given."""
        return self._validate(
            name,
            LocationType.TOWN,
            lambda: self.directory.get_towns(chiefdom, section),
            scope=chiefdom,
        )

    def validate_hierarchy(
        self,
        location: Union[LocationHierarchy, Dict[str, Optional[str]]]
    ) -> ValidationResult:
        """
        Validate every level given in a location.

        District is checked against region, council and chiefdom against
        district, section against chiefdom, and town against chiefdom and
        section. Council, chiefdom and section checks need their parent to be
        given. All failures are reported together, separated by "; ".
        """
        if isinstance(location, dict):
            location = LocationHierarchy(**location)

        checks = []
        if location.region:
            checks.append(lambda: self.is_valid_region(location.region))
        if location.district:
            checks.append(lambda: self.is_valid_district(location.district, location.region))
        if location.council and location.district:
            checks.append(lambda: self.is_valid_council(location.council, location.district))
        if location.chiefdom and location.district:
            checks.append(lambda: self.is_valid_chiefdom(location.chiefdom, location.district))
        if location.section and location.chiefdom:
            checks.append(lambda: self.is_valid_section(location.section, location.chiefdom))
        if location.town:
            checks.append(lambda: self.is_valid_town(location.town, location.chiefdom, location.section))

        errors = []
        for check in checks:
            result = check()
            if not result.is_valid:
                errors.append(result.message)

        if errors:
            return ValidationResult(is_valid=False, message="; ".join(errors))
        return ValidationResult(is_valid=True)

    def validate_batch(
        self,
        names: Iterable[str],
        location_type: Union[LocationType, str]
    ) -> List[ValidationResult]:
        """Validate many names at one level, without parent scope."""
        location_type = LocationType.parse(location_type)
        check = {
            LocationType.REGION: self.is_valid_region,
            LocationType.DISTRICT: self.is_valid_district,
            LocationType.COUNCIL: self.is_valid_council,
            LocationType.CHIEFDOM: self.is_valid_chiefdom,
            LocationType.SECTION: self.is_valid_section,
            LocationType.TOWN: self.is_valid_town,
        }[location_type]
        return [check(name) for name in names]
