#!/usr/bin/env python3
"""CLI script to load the location table, build the search index and report statistics."""
import argparse
import json
import sys
from pathlib import Path
from sl_locations.core.config import LOCATIONS_CSV_PATH, LOG_LEVEL
from sl_locations.core.exceptions import FormatError
from sl_locations.core.service import LocationService
from sl_locations.utils.logging import setup_logging


def main(argv=None):
    parser = argparse.ArgumentParser(description="Build location search index")
    parser.add_argument("--csv-path", type=Path, default=LOCATIONS_CSV_PATH,
                        help="Location CSV path")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Log level")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    print(f"Loading {args.csv_path}...")
    try:
        service = LocationService.from_csv(args.csv_path)
    except FormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("✅ Index built successfully")
    print(json.dumps(service.get_statistics().to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
