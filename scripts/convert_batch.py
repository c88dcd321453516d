#!/usr/bin/env python3
"""Run a batch file of conversions through a standalone session.

Each line of the input file is ``value,sourceBase,targetBase``. Results and
a statistics summary are printed; the session export can be written to a
file.
"""

import argparse
import logging
import sys
from pathlib import Path

from radix_app.config import MAX_PRECISION, settings
from radix_app.services.batch_service import run_batch
from radix_app.services.export_service import export_records
from radix_app.services.session_ledger import SessionLedger
from radix_app.services.stats_service import summarize


def print_summary(ledger: SessionLedger) -> None:
    """Print the statistics of the batch session."""
    stats = summarize(ledger.records, top_n=settings.top_pairs_count)
    print()
    print(f"Total Conversions - {stats.total_conversions}")
    print(f"Total Successful Conversions - {stats.successful_conversions}")
    print(f"Total Failed Conversions - {stats.failed_conversions}")
    print(f"Most Used Source Base - {stats.most_used_source_base or 'None'}")
    print(f"Most Used Target Base - {stats.most_used_target_base or 'None'}")
    for pair in stats.top_base_pairs:
        print(f"  {pair.pair} (Frequency - {pair.count})")


def main() -> int:
    """Convert a batch file."""
    parser = argparse.ArgumentParser(description="Convert a batch file of numerals")
    parser.add_argument("input", type=Path, help="File with value,sourceBase,targetBase lines")
    parser.add_argument("--export", type=Path, help="Write the session export to this file")
    parser.add_argument(
        "--precision",
        type=int,
        default=settings.default_precision,
        help=f"Fractional digits to emit (0-{MAX_PRECISION})",
    )
    parser.add_argument("--user", default="batch", help="User id recorded on the session")
    args = parser.parse_args()

    if not 0 <= args.precision <= MAX_PRECISION:
        print(f"Precision must be between 0 and {MAX_PRECISION}", file=sys.stderr)
        return 2

    try:
        lines = args.input.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        print(f"There was a problem while reading the file: {e}", file=sys.stderr)
        return 1

    # Keep per-conversion log lines out of the printed results
    logging.getLogger().setLevel(logging.WARNING)

    ledger = SessionLedger(args.user, precision=args.precision)
    report = run_batch(ledger, lines)

    for result in report.results:
        if result.parse_error:
            print(f"Line {result.line_number}: {result.parse_error}")
        else:
            outcome = result.record.result or result.record.error_message
            print(f"Line {result.line_number}: {outcome}")

    print_summary(ledger)

    if args.export:
        try:
            args.export.write_text(export_records(ledger.records), encoding="utf-8")
        except OSError as e:
            print(f"There was a problem while exporting to the file: {e}", file=sys.stderr)
            return 1
        print(f"\nExported {len(ledger)} conversions to {args.export}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
