#!/usr/bin/env python3
"""CLI script to search, autocomplete, suggest and validate location names."""
import argparse
import json
import sys
from pathlib import Path
from sl_locations.core.config import (
    LOCATIONS_CSV_PATH,
    DEFAULT_SEARCH_LIMIT,
    DEFAULT_AUTOCOMPLETE_LIMIT,
    DEFAULT_SUGGESTION_LIMIT,
)
from sl_locations.core.exceptions import LocationError
from sl_locations.core.models import ALL_LOCATION_TYPES, LocationHierarchy, SearchOptions
from sl_locations.core.service import LocationService
from sl_locations.utils.logging import setup_logging

TYPE_CHOICES = [t.value for t in ALL_LOCATION_TYPES]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query Sierra Leone locations")
    parser.add_argument("--csv-path", type=Path, default=LOCATIONS_CSV_PATH,
                        help="Location CSV path")
    parser.add_argument("--log-level", default="WARNING", help="Log level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Ranked search")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=DEFAULT_SEARCH_LIMIT)
    search.add_argument("--min-score", type=float, default=0.3)
    search.add_argument("--type", dest="types", action="append", choices=TYPE_CHOICES,
                        help="Restrict to a level (repeatable)")
    search.add_argument("--no-fuzzy", action="store_true", help="Disable phonetic matching")

    autocomplete = subparsers.add_parser("autocomplete", help="Complete a partial name")
    autocomplete.add_argument("query")
    autocomplete.add_argument("--limit", type=int, default=DEFAULT_AUTOCOMPLETE_LIMIT)

    suggest = subparsers.add_parser("suggest", help="Names starting with a prefix")
    suggest.add_argument("partial")
    suggest.add_argument("--type", choices=TYPE_CHOICES)
    suggest.add_argument("--limit", type=int, default=DEFAULT_SUGGESTION_LIMIT)

    validate = subparsers.add_parser("validate", help="Validate a location hierarchy")
    for level in TYPE_CHOICES:
        validate.add_argument(f"--{level}")

    return parser


def run(service: LocationService, args: argparse.Namespace):
    """Execute a parsed command and return a JSON-serializable result."""
    if args.command == "search":
        options = SearchOptions(
            limit=args.limit,
            min_score=args.min_score,
            types=tuple(args.types) if args.types else ALL_LOCATION_TYPES,
            fuzzy=not args.no_fuzzy,
        )
        return [result.to_dict() for result in service.search(args.query, options)]
    if args.command == "autocomplete":
        return service.autocomplete(args.query, limit=args.limit)
    if args.command == "suggest":
        return service.get_suggestions(args.partial, args.type, args.limit)

    hierarchy = LocationHierarchy(**{level: getattr(args, level) for level in TYPE_CHOICES})
    return service.validate_hierarchy(hierarchy).to_dict()


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        service = LocationService.from_csv(args.csv_path)
        output = run(service, args)
    except LocationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
