#!/usr/bin/env python3
"""
Vendor Search Script

Searches all configured sources (web search, language model, curated
catalog) for suppliers of a medicine and prints the merged candidates.

Credentials are read from the environment or a local .env file:
GOOGLE_SEARCH_API_KEY, GOOGLE_SEARCH_ENGINE_ID, BING_API_KEY, OPENAI_API_KEY.

Usage:
    python3 scripts/search_vendors.py Iohexol
    python3 scripts/search_vendors.py Iohexol --dosage "300 mg/ml" --country Latvia
    python3 scripts/search_vendors.py Paracetamol --adapters known_vendors,google --depth 2
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pharmascout.common.log_config import setup_logging
from pharmascout.pipeline import aggregate_vendor_search

logger = logging.getLogger(__name__)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Search suppliers for a medicine across vendor sources")
    parser.add_argument("medicine", help="Medicine name (e.g. Iohexol)")
    parser.add_argument("--dosage", help="Strength qualifier (e.g. '300 mg/ml')")
    parser.add_argument("--country", help="Country or region qualifier")
    parser.add_argument(
        "--depth",
        type=int,
        default=3,
        help="Query variants per source, 1-5 (default: 3)"
    )
    parser.add_argument(
        "--adapters",
        help="Comma-separated sources (default: PHARMASCOUT_ADAPTERS or all)"
    )
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=20,
        help="Number of candidates to print (default: 20)"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    parser.add_argument("--quiet", action="store_true", help="Suppress info messages")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    adapter_names = [a.strip() for a in args.adapters.split(",") if a.strip()] if args.adapters else None

    try:
        result = aggregate_vendor_search(
            args.medicine,
            dosage=args.dosage,
            country=args.country,
            search_depth=args.depth,
            adapter_names=adapter_names,
        )
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)

    print("=" * 60)
    print(f"Vendors for {result.medicine_name}")
    print("=" * 60)
    print(f"  Query:            {result.search_query}")
    print(f"  Unique vendors:   {result.total_found}")
    print(f"  Sources used:     {', '.join(result.sources_used) or '-'}")
    print(f"  Data quality:     {result.data_quality.value}")
    print(f"  Search time:      {result.search_time:.1f}s")
    for source, count in sorted(result.candidates_by_source.items()):
        print(f"    {source:<16} {count}")

    print()
    for candidate in result.candidates[:args.limit]:
        certs = ", ".join(sorted(candidate.certifications))
        print(f"  {candidate.confidence:.2f}  {candidate.company_name} [{candidate.business_type.value}]")
        if candidate.website:
            print(f"        {candidate.website}")
        if certs:
            print(f"        certifications: {certs}")

    if result.insights:
        print("\nSummary")
        print("-" * 60)
        print(f"  {result.insights.summary}")
        for recommendation in result.insights.recommendations:
            print(f"  * {recommendation}")
        for warning in result.insights.warnings:
            print(f"  ! {warning}")

    if result.errors:
        print(f"\nErrors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  - {error}")


if __name__ == "__main__":
    main()
