#!/usr/bin/env python3
"""
Supplier Matching Script

Matches products against an extracted registry CSV and lists, per
wholesaler, the registered drugs and the resolved vendor contact.

Products come from the command line or from a CSV with an
"Active Substance" column (optional "Dosage Form"). Vendor contacts come
from an optional CSV with "Name" and "Email" columns.

Usage:
    python3 scripts/match_suppliers.py --registry data/registry/records.csv --substance Ibuprofenum
    python3 scripts/match_suppliers.py --registry records.csv --products products.csv --vendors vendors.csv
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pharmascout.common.csv_utils import configure_csv, read_csv
from pharmascout.common.log_config import setup_logging
from pharmascout.export import RegistryCSVExporter
from pharmascout.models import VendorContact
from pharmascout.pipeline import match_product_to_suppliers
from pharmascout.storage import InMemoryVendorStore

logger = logging.getLogger(__name__)


def load_products(args) -> list:
    if args.products:
        products = []
        for row in read_csv(args.products):
            substance = (row.get("Active Substance") or "").strip()
            if substance:
                products.append((substance, (row.get("Dosage Form") or "").strip() or None))
        return products
    return [(args.substance, args.dosage_form)]


def load_vendors(path) -> InMemoryVendorStore:
    store = InMemoryVendorStore()
    if path:
        for index, row in enumerate(read_csv(path), 1):
            name = (row.get("Name") or "").strip()
            if name:
                store.add(VendorContact(vendor_id=row.get("Id") or str(index), name=name,
                                        email=(row.get("Email") or "").strip()))
    return store


def main():
    parser = argparse.ArgumentParser(description="Match products to registry wholesalers")
    parser.add_argument("--registry", "-r", required=True, help="Registry CSV from extract_registry.py")
    parser.add_argument("--substance", "-s", help="Active substance to match")
    parser.add_argument("--dosage-form", help="Optional dosage form filter")
    parser.add_argument("--products", "-p", help="CSV with an 'Active Substance' column")
    parser.add_argument("--vendors", help="CSV of vendor contacts (Name, Email)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    parser.add_argument("--quiet", action="store_true", help="Suppress info messages")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    configure_csv()

    if not args.substance and not args.products:
        parser.error("one of --substance or --products is required")
    for path in (args.registry, args.products, args.vendors):
        if path and not os.path.exists(path):
            print(f"File not found: {path}")
            sys.exit(1)

    try:
        records = RegistryCSVExporter().load(args.registry)
    except ValueError as e:
        logger.error("Cannot read registry CSV: %s", e)
        sys.exit(1)
    vendor_store = load_vendors(args.vendors)

    for substance, dosage_form in load_products(args):
        matches = match_product_to_suppliers(substance, dosage_form, records=records,
                                             vendor_store=vendor_store)
        label = f"{substance} ({dosage_form})" if dosage_form else substance
        print("=" * 60)
        print(f"{label}: {len(matches)} supplier(s)")
        print("=" * 60)
        for match in matches:
            contact = f"{match.contact.name} <{match.contact.email}>" if match.contact else "no contact"
            print(f"  {match.wholesaler_name}, {match.wholesaler_address} [{match.wholesaler_license}]")
            print(f"    contact: {contact}")
            for drug in match.drugs:
                print(f"    - {drug.registration_number}  {drug.drug_name} {drug.concentration} ({drug.dosage_form})")


if __name__ == "__main__":
    main()
