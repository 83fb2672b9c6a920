#!/usr/bin/env python3
"""
Registry Extraction Script

Extracts wholesale permission records from the medicines registry and
writes them to a 12-column CSV.

Usage:
    python3 scripts/extract_registry.py
    python3 scripts/extract_registry.py --max-pages 3 --page-size 50
    python3 scripts/extract_registry.py --client browser --output data/registry.csv
    python3 scripts/extract_registry.py --stats
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pharmascout.common.log_config import setup_logging
from pharmascout.export import RegistryCSVExporter
from pharmascout.extraction import CLIENTS, registry_stats
from pharmascout.pipeline import extract_registry

logger = logging.getLogger(__name__)


def print_stats(records) -> None:
    stats = registry_stats(records)
    print("\nRegistry statistics")
    print("-" * 60)
    print(f"  Records:          {stats.total_drugs}")
    print(f"  Manufacturers:    {stats.total_manufacturers}")
    print(f"  Wholesalers:      {stats.total_wholesalers}")
    print("  Top wholesalers:")
    for name, count in stats.top_wholesalers:
        print(f"    {count:4d}  {name}")
    print("  ATC categories:")
    for entry in stats.atc_distribution:
        print(f"    {entry['count']:4d}  {entry['code']} {entry['name']}")


def main():
    parser = argparse.ArgumentParser(
        description="Extract wholesale permission records from the medicines registry"
    )
    parser.add_argument(
        "--output", "-o",
        default="data/registry/records.csv",
        help="Output CSV file (default: data/registry/records.csv)"
    )
    parser.add_argument(
        "--max-pages", "-p",
        type=int,
        help="Maximum pages to extract (default: config/registry.yaml)"
    )
    parser.add_argument(
        "--page-size",
        type=int,
        help="Records per registry page (default: config/registry.yaml)"
    )
    parser.add_argument(
        "--delay", "-d",
        type=int,
        help="Delay between page loads in milliseconds"
    )
    parser.add_argument(
        "--client", "-c",
        choices=sorted(CLIENTS),
        default="http",
        help="Page client: plain HTTP or headless browser (default: http)"
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print registry statistics after extraction"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    print("=" * 60)
    print("Registry Extraction")
    print("=" * 60)
    print(f"  Client:           {args.client}")
    print(f"  Output CSV:       {args.output}")

    try:
        result = extract_registry(
            max_pages=args.max_pages,
            page_size=args.page_size,
            delay_ms=args.delay,
            client=args.client,
        )
    except ValueError as e:
        logger.error("Invalid extraction settings: %s", e)
        sys.exit(1)

    output_dir = os.path.dirname(args.output)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    written = RegistryCSVExporter().export(result.records, args.output)

    print(f"\n  Pages processed:  {result.pages_processed}")
    print(f"  Rows seen:        {result.rows_seen}")
    print(f"  Rows dropped:     {result.rows_dropped}")
    print(f"  Records written:  {written}")
    if result.errors:
        print(f"  Errors:           {len(result.errors)}")
        for error in result.errors[:10]:
            print(f"    - {error}")
        if len(result.errors) > 10:
            print(f"    ... and {len(result.errors) - 10} more")

    if args.stats:
        print_stats(result.records)

    if not result.records:
        sys.exit(1)


if __name__ == "__main__":
    main()
