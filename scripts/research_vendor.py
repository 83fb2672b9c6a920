#!/usr/bin/env python3
"""
Vendor Research Script

Finds a vendor's website, scrapes it for scale signals and classifies the
vendor as Bulk Supplier, Mid-size Distributor or Small Retailer.

Usage:
    python3 scripts/research_vendor.py "Tamro"
    python3 scripts/research_vendor.py "Tamro" --country Latvia
    python3 scripts/research_vendor.py "Acme Pharma" --website https://acme.example
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pharmascout.common.log_config import setup_logging
from pharmascout.models import ResearchStatus
from pharmascout.pipeline import research_vendor

logger = logging.getLogger(__name__)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Research and classify a pharmaceutical vendor")
    parser.add_argument("vendor", help="Vendor name")
    parser.add_argument("--country", help="Country used in website discovery")
    parser.add_argument("--website", help="Known website (skips discovery)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    parser.add_argument("--quiet", action="store_true", help="Suppress info messages")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        intel = research_vendor(args.vendor, country=args.country, known_website=args.website)
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)

    print("=" * 60)
    print(f"Vendor Research: {intel.vendor_name}")
    print("=" * 60)
    print(f"  Status:           {intel.research_status.value}")
    print(f"  Website:          {intel.official_website or '-'}")
    print(f"  Data source:      {intel.data_source or '-'}")

    if intel.research_status == ResearchStatus.FAILED:
        print(f"  Error:            {intel.research_error}")
        sys.exit(1)

    print(f"  Classification:   {intel.supplier_classification} (score {intel.classification_score})")
    print(f"  Confidence:       {intel.confidence_score:.0%}")
    print(f"  Business type:    {intel.business_type or '-'}")
    print(f"  Company size:     {intel.company_size or '-'}")
    print(f"  Employees:        {intel.employee_count or '-'}")
    print(f"  Minimum order:    {intel.minimum_order_qty or '-'}")
    print(f"  Locations:        {intel.number_of_locations or '-'}")
    print(f"  Coverage:         {intel.geographic_coverage or '-'}")
    print(f"  Certifications:   {', '.join(intel.certifications_found) or '-'}")
    print(f"  Client types:     {', '.join(intel.primary_client_types) or '-'}")
    print(f"  Email:            {intel.contact_email or '-'}")
    print(f"  Phone:            {intel.contact_phone or '-'}")


if __name__ == "__main__":
    main()
