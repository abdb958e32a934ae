"""
Convert Invoicing Spreadsheet to Shipments JSON
===============================================

Reads an albaranes export (xlsx), detects the header row, maps every data
row to a raw shipment record and writes them as a JSON array the loadboard
can load (drop it in loadboard/data/shipments.json or paste it).

Usage:
    python -m loadboard.scripts.convert_spreadsheet albaranes.xlsx
    python -m loadboard.scripts.convert_spreadsheet albaranes.xlsx --output loadboard/data/shipments.json
    python -m loadboard.scripts.convert_spreadsheet albaranes.xlsx --summary
"""

import argparse
import json
import sys
from pathlib import Path

from loadboard.pipeline import aggregate_counts, aggregate_payments, normalize_shipments
from loadboard.sources import load_spreadsheet


# =============================================================================
# CONVERSION
# =============================================================================

def convert(input_path: Path, output_path: Path) -> list[dict]:
    """
    Convert a spreadsheet file to a shipments JSON file.

    Raises:
        FileNotFoundError: If input_path does not exist
        ValueError: If no header row is found
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Spreadsheet not found: {input_path}")

    print(f"\nStep 1: Reading {input_path}...")
    records = load_spreadsheet(input_path)
    if not records:
        raise ValueError(f"No header row found in the first rows of {input_path}")
    print(f"  Mapped {len(records):,} rows")

    print(f"\nStep 2: Writing {output_path}...")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(records, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    print(f"  Wrote {len(records):,} records")

    return records


def print_summary(records: list[dict]) -> None:
    """Print the same counts and payment buckets the dashboard header shows."""
    df = normalize_shipments(records)
    counts = aggregate_counts(df)
    payments = aggregate_payments(df)

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"Shipments listed:  {counts['total']:,} (of {len(records):,} rows)")
    print(f"Delivered:         {counts['delivered']:,}")
    print(f"In transit / OFD:  {counts['in_transit']:,}")
    print(f"Pieces:            {counts['total_pieces']:,}")
    print(f"Weight:            {counts['total_weight']:,.1f} kg")
    print()
    print(f"{'':10} {'Count':>7} {'Pieces':>8} {'Kg':>10} {'Portes':>12} {'IVA':>10} {'Total':>12}")
    for label, bucket in zip(("PAGADOS", "DEBIDOS", "TOTALES"), payments):
        print(
            f"{label:10} {bucket.count:>7,} {bucket.pieces:>8,} {bucket.kg:>10,.1f} "
            f"{bucket.portes:>12,.2f} {bucket.iva:>10,.2f} {bucket.total:>12,.2f}"
        )


# =============================================================================
# MAIN
# =============================================================================

def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Convert an invoicing spreadsheet to loadboard shipments JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m loadboard.scripts.convert_spreadsheet albaranes.xlsx
  python -m loadboard.scripts.convert_spreadsheet albaranes.xlsx --output loadboard/data/shipments.json
  python -m loadboard.scripts.convert_spreadsheet albaranes.xlsx --summary
        """
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Spreadsheet to convert (first worksheet is read)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output JSON path (default: input path with .json suffix)"
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print shipment counts and payment totals after converting"
    )

    args = parser.parse_args(argv)
    output_path = args.output or args.input.with_suffix(".json")

    try:
        records = convert(args.input, output_path)
        if args.summary:
            print_summary(records)

        print("\n" + "=" * 60)
        print(f"Successfully converted {len(records):,} rows to {output_path}")
        print("=" * 60)

    except KeyboardInterrupt:
        print("\n\nCancelled.")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        raise


if __name__ == "__main__":
    main()
